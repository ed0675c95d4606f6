# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

# NOTE: Development server only. Production runs `gunicorn -c gunicorn.conf.py blog:app`,
# and the static export runs `flask --app blog freeze`.

from blog import app

app.run("0.0.0.0", 8000, debug=True)
