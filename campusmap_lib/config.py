# --- campusmap_lib/config.py ---
import configparser
import logging
import re

from .rendering.constants import PATH_CODE, RESET, SERVICE_CODE, style_token

log = logging.getLogger("campusmap.config")

DEFAULT_CONFIG_PATH = "campusmap.cfg"

# An SGR parameter list such as "1" or "38;5;43".
_SGR_CODE = re.compile(r"^\d+(;\d+)*$")


class ConfigService:
    """Reads the campusmap.cfg file: input files and highlight colors."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = config_path
        self.defaults = {
            "Data": {
                "topology_file": "data/buildingData.txt",
                "map_file": "data/campusMap.txt",
            },
            "Styles": {
                "path": PATH_CODE,
                "service": SERVICE_CODE,
            },
        }

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser()
        config.read_dict(self.defaults)

        if not config.read(self.config_path, encoding="utf-8"):
            log.info("No config at %s, writing defaults.", self.config_path)
            self.save_settings(self._config_to_dict(config))

        return self._config_to_dict(config)

    def save_settings(self, settings: dict):
        """Writes every section of `settings`; a failed write is only logged."""
        config = configparser.ConfigParser()
        config.read_dict({s: {k: str(v) for k, v in vals.items()} for s, vals in settings.items()})

        try:
            with open(self.config_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
            log.info("Settings saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)

    def input_files(self, settings: dict, topology=None, map_path=None):
        """Returns (topology_file, map_file); explicit paths win over config."""
        data = settings["Data"]
        return topology or data["topology_file"], map_path or data["map_file"]

    def style_args(self, settings: dict, use_color: bool = True) -> dict:
        """
        Builds the Campus style keyword arguments from the [Styles] section.

        A value that is not an SGR code list falls back to the default color.
        With colors off every token is empty, so rendering returns plain text.
        """
        if not use_color:
            return {"path_style": "", "service_style": "", "reset": ""}
        styles = settings["Styles"]
        args = {}
        for key in ("path", "service"):
            code = styles.get(key, "").strip()
            if not _SGR_CODE.match(code):
                log.warning(
                    "Ignoring invalid %s style %r in %s.", key, code, self.config_path
                )
                code = self.defaults["Styles"][key]
            args[f"{key}_style"] = style_token(code)
        args["reset"] = RESET
        return args

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        return {s: dict(config.items(s)) for s in config.sections()}
