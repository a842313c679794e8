# run.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file for local development.
# This should be the first thing to run.
load_dotenv()

from guardian_health.factory import create_app

app = create_app()

# For production, use a WSGI server like Gunicorn against wsgi:app.
if __name__ == '__main__':
    port = int(os.environ.get('PORT', 8080))
    debug_mode = app.config.get("DEBUG", False)

    app.run(host='0.0.0.0', port=port, debug=debug_mode, threaded=True)
