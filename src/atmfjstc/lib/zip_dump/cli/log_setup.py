import logging


def init_console_friendly_logging(level: int = logging.INFO):
    """
    Initializes logging for diagnosing the dumper in the console. Log messages go to stderr, so they do not get mixed
    into a transcript that is redirected to a file.

    - A timestamp is attached to each message
    - The level is attached to each message as a string (INFO, DEBUG etc)
    """
    logging.basicConfig(
        level=level,
        style='{',
        format='[{asctime}] {levelname}: {message}',
        datefmt='%Y-%m-%d %H:%M:%S'  # We omit the milliseconds by default
    )
