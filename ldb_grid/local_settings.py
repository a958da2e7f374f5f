import logging
import os
import threading
from typing import Any, Optional

import yaml
from appdirs import user_config_dir
from attrs import define, field
from pyrsistent import freeze, pmap, thaw
from pyrsistent.typing import PMap

DEBOUNCE_TIME = 2
APP_NAME = "ldb-grid"
VIEWS_KEY = "views"
logger = logging.getLogger(__name__)


@define
class LocalSettings:
    """Settings of the application stored as YAML in the user's
    configuration directory.

    View preferences live in the `views` mapping; keys are used verbatim so
    they may contain dots, slashes or any other character.

    Attributes:
        settings: The current settings tree.
        config_dir: Directory of the settings file; defaults to the
            platform's user configuration directory.
    """

    settings: PMap[str, Any] = field(default=pmap())
    config_dir: Optional[str] = field(default=None)
    _save_timer: Optional[threading.Timer] = field(default=None, init=False)
    _save_lock: threading.Lock = field(factory=threading.Lock, init=False)

    def __attrs_post_init__(self):
        self.load_settings()

    def get(self, key: str) -> Optional[str]:
        """Get a stored view record."""
        return self.settings.get(VIEWS_KEY, pmap()).get(key)

    def set(self, key: str, value: str) -> None:
        """Store a view record and schedule a save."""
        views = self.settings.get(VIEWS_KEY, pmap())
        if views.get(key) == value:
            return
        self.settings = self.settings.set(VIEWS_KEY, views.set(key, value))
        self.save_settings()

    def _debounced_save(self):
        """Timer callback that writes the pending settings."""
        try:
            with self._save_lock:
                self._save_timer = None
                self._do_save_settings()
        except Exception as e:
            logger.error(f"Error saving settings: {e}")

    def _do_save_settings(self):
        """Write the file through a temporary sibling."""
        settings_file = self.settings_file()
        tmp_settings = f"{settings_file}.tmp"
        with open(tmp_settings, "w", encoding="utf-8") as f:
            yaml.safe_dump(thaw(self.settings), f, allow_unicode=True)
        os.replace(tmp_settings, settings_file)

    def save_settings(self):
        """Schedule a save; repeated calls within the debounce window are
        folded into one write.
        """
        with self._save_lock:
            if self._save_timer is not None:
                self._save_timer.cancel()
            self._save_timer = threading.Timer(
                DEBOUNCE_TIME, self._debounced_save
            )
            self._save_timer.daemon = True
            self._save_timer.start()

    def flush(self):
        """Write pending changes now."""
        with self._save_lock:
            if self._save_timer is None:
                return
            self._save_timer.cancel()
            self._save_timer = None
            self._do_save_settings()

    def load_settings(self):
        """Load the settings from the configuration directory.

        A missing, empty or unreadable file leaves the settings empty.
        """
        settings_file = self.settings_file()
        if not os.path.exists(settings_file):
            logger.debug(f"settings file {settings_file} does not exist")
            return
        try:
            with open(settings_file, "r", encoding="utf-8") as f:
                tmp = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            logger.warning(
                "settings file %s could not be read",
                settings_file,
                exc_info=True,
            )
            return
        if tmp is None:
            logger.warning(f"settings file {settings_file} is empty")
            return
        if not isinstance(tmp, dict):
            logger.warning(
                f"settings file {settings_file} does not hold a mapping"
            )
            return
        self.settings = freeze(tmp)
        logger.debug(f"settings loaded from {settings_file}")

    def settings_file(self) -> str:
        """Path of the YAML file; creates its directory if needed."""
        config_dir = self.config_dir or user_config_dir(APP_NAME)
        if not os.path.exists(config_dir):
            os.makedirs(config_dir)
        return os.path.join(config_dir, "settings.yaml")
