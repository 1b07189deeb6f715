import toml

_config = None


class ConfigNotFound(Exception):
    pass


class SecretNotFound(Exception):
    pass


def get_config():
    if _config is None:
        raise ConfigNotFound("configuration has not been initialized")
    return _config


def init(config):
    global _config  # noqa: PLW0603
    _config = config
    return _config


def init_from_toml(configfile):
    return init(toml.load(configfile))


def read_all(section):
    try:
        return get_config()[section]
    except KeyError as e:
        raise SecretNotFound(
            f"section {section} not found in config file: {e!s}"
        ) from None
