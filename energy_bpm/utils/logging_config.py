import logging

APP_LOGGER_NAME = 'energy_bpm'


def setup_logging(debug=False, log_file=None):
    """
    Configure logging for the application.

    Args:
        debug: If True, set log level to DEBUG, otherwise INFO
        log_file: Optional path of a log file written alongside the console
    """
    # Set root logger to a high level to suppress most messages
    logging.getLogger().setLevel(logging.WARNING)

    # Create our app logger
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    level = logging.DEBUG if debug else logging.INFO
    app_logger.setLevel(level)

    # Repeated calls (CLI re-entry, tests) must not stack handlers
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    # Configure handlers
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w'))

    # Set format
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    # Explicitly silence noisy libraries
    for noisy_logger in ['numba', 'matplotlib', 'PIL']:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    return app_logger
