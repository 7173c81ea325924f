"""
Development entry point.
"""
from finance_tracker import create_app, install_signal_handlers

app = create_app()


if __name__ == '__main__':
    # For development
    install_signal_handlers(app)
    app.run(host='0.0.0.0', port=5000, debug=app.config['DEBUG'])
