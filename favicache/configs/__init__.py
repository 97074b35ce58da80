"""Configuration for favicache"""

import pathlib

from dynaconf import Dynaconf, Validator

# Validators for favicache settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    Validator("metrics.dev_logger", is_type_of=bool),
    Validator("metrics.host", is_type_of=str),
    Validator("metrics.port", gte=0, is_type_of=int),
    Validator("sentry.env", is_in=["prod", "stage", "dev"]),
    Validator("sentry.mode", is_in=["disabled", "release", "debug"]),
    Validator("sentry.traces_sample_rate", gte=0, lte=1),
    Validator("runtime.icon_response_ttl_sec", is_type_of=int, gte=0),
    Validator("icons.cache_dir", is_type_of=str, must_exist=True),
    Validator("icons.default_icon_path", is_type_of=str, must_exist=True),
    Validator("icons.cache_ttl_days", is_type_of=int, gt=0),
    Validator("icons.exhaustion_policy", is_in=["strict", "degraded"]),
    # Upstream favicon services must not hold a request for long, the connect
    # timeout is capped at 3 seconds and the overall request at 10 seconds.
    Validator("icons.http.connect_timeout_sec", is_type_of=(int, float), gt=0, lte=3.0),
    Validator("icons.http.request_timeout_sec", is_type_of=(int, float), gt=0, lte=10.0),
    Validator("icons.http.user_agent", is_type_of=str),
    Validator("icons.providers", is_type_of=list, must_exist=True),
]

# `root_path` = The directory holding the settings files.
# `envvar_prefix` = Export envvars with `export FAVICACHE_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing` etc.
# `env_switcher` = Switch environments by `export FAVICACHE_ENV=production`.
#                  Default: `development`.
# `merge_enabled` = Deep merge environment tables over the `default` ones.
# `validators` = Define validators for favicache settings.

settings = Dynaconf(
    root_path=str(pathlib.Path(__file__).parent),
    envvar_prefix="FAVICACHE",
    settings_files=[
        "default.toml",
        "development.toml",
        "production.toml",
        "testing.toml",
    ],
    environments=True,
    env_switcher="FAVICACHE_ENV",
    merge_enabled=True,
    validators=_validators,
)
