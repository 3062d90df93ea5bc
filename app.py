"""
WSGI entry point.

Usage Examples:
    # Production: point any WSGI server at the module-level application
    <wsgi-server> "app:application"

    # Development server
    python app.py --port 5000 --config development
"""

import argparse
import atexit
import os

from hireguard.app import create_app, shutdown_app

application = create_app()
atexit.register(shutdown_app, application)

# Alias for tooling that expects ``app``
app = application


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='hireguard development server')
    parser.add_argument(
        '--host',
        default=os.getenv('FLASK_HOST', '127.0.0.1'),
        help='Development server host (default: 127.0.0.1)'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=int(os.getenv('FLASK_PORT', 5000)),
        help='Development server port (default: 5000)'
    )
    parser.add_argument(
        '--config',
        default=None,
        choices=['development', 'testing', 'production'],
        help='Configuration environment (default: HIREGUARD_ENV or FLASK_ENV)'
    )
    args = parser.parse_args()

    server = create_app(args.config) if args.config else application
    server.run(host=args.host, port=args.port, debug=server.config['DEBUG'])
