from ruamel import yaml
from ruamel.yaml.error import YAMLError

__all__ = ["YAMLError", "create_ruamel_instance", "safe_load"]


def create_ruamel_instance(
    typ: str = "safe",
    pure: bool = True,
) -> yaml.YAML:
    return yaml.YAML(typ=typ, pure=pure)


def safe_load(content: str | bytes) -> object:
    """
    Loads a single YAML document, returns None for an empty one.
    """
    return create_ruamel_instance().load(content)
