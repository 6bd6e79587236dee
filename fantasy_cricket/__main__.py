"""Entry point: python -m fantasy_cricket"""

from fantasy_cricket.logging_config import setup_logging

setup_logging()

from fantasy_cricket.api import create_app

app = create_app()
app.run(host="127.0.0.1", port=9874, debug=False, threaded=True)
