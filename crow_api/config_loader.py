# AGPL-3.0 License

from os.path import abspath, dirname, join

from dynaconf import Dynaconf

current_dir = dirname(abspath(__file__))
global_settings = Dynaconf(
    envvar_prefix="CROW_API",
    merge_enabled=True,
    load_dotenv=False,
    settings_files=[join(current_dir, f) for f in [
        "settings/configuration.toml",
    ]]
)


def get_settings():
    """
    Retrieves the current settings.

    Values come from settings/configuration.toml and can be overridden with
    CROW_API_ prefixed environment variables, e.g.
    CROW_API_LAMBDA__RUNTIME=NODEJS_18_X.

    Returns:
        Dynaconf: The current settings object.
    """
    return global_settings
