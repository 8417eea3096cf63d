"""
Config Loader Module - Handles configuration loading and validation
"""

import os
import logging
from pathlib import Path

import yaml

from .. import config as config_module
from .errors import ConfigError

logger = logging.getLogger(__name__)

YAML_KEYS = {'base_dir', 'pkgver', 'pkgrel', 'debug_mode', 'exclude_packages'}


class ConfigLoader:
    """Resolves the run configuration: config.py defaults < YAML file < environment"""

    def __init__(self, environ=None):
        self.environ = os.environ if environ is None else environ

    def load(self):
        """
        Build the configuration dictionary for a run.

        Resolution order (later wins):
        1. Module defaults from config.py
        2. YAML file from XLIBRE_BUILDER_CONFIG, else <base_dir>/xlibre-builder.yaml
        3. Environment variables XLIBRE_BASE_DIR, XLIBRE_PKGVER, XLIBRE_PKGREL, XLIBRE_DEBUG

        Returns:
            dict with resolved paths and settings

        Raises:
            ConfigError: if the YAML file is malformed or has unknown keys
        """
        settings = {
            'base_dir': config_module.BASE_DIR,
            'pkgver': config_module.PKGVER,
            'pkgrel': config_module.PKGREL,
            'debug_mode': False,
            'exclude_packages': [],
        }

        env_base = self.environ.get('XLIBRE_BASE_DIR')
        explicit_file = self.environ.get('XLIBRE_BUILDER_CONFIG')
        if explicit_file:
            yaml_path = Path(explicit_file).expanduser()
            if not yaml_path.is_file():
                raise ConfigError(f"Config file not found: {yaml_path}")
        else:
            base_guess = Path(env_base or settings['base_dir']).expanduser()
            yaml_path = base_guess / config_module.CONFIG_FILE_NAME

        if yaml_path.is_file():
            settings.update(self.load_yaml(yaml_path))
            logger.info(f"CONFIG_SOURCE=yaml path={yaml_path}")

        if env_base:
            settings['base_dir'] = env_base
        if self.environ.get('XLIBRE_PKGVER'):
            settings['pkgver'] = self.environ['XLIBRE_PKGVER']
        if self.environ.get('XLIBRE_PKGREL'):
            settings['pkgrel'] = self.environ['XLIBRE_PKGREL']
        if self.environ.get('XLIBRE_DEBUG'):
            settings['debug_mode'] = self.environ['XLIBRE_DEBUG'].lower() in ('1', 'true', 'yes')

        return self._resolve(settings)

    @staticmethod
    def load_yaml(path):
        """Parse and validate the YAML override file"""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

        unknown = set(data) - YAML_KEYS
        if unknown:
            raise ConfigError(f"Unknown keys in {path}: {', '.join(sorted(unknown))}")

        if 'debug_mode' in data and not isinstance(data['debug_mode'], bool):
            raise ConfigError(f"debug_mode in {path} must be true or false")

        exclude = data.get('exclude_packages', [])
        if exclude is not None and not isinstance(exclude, list):
            raise ConfigError(f"exclude_packages in {path} must be a list")

        # pkgver: 21.1 would otherwise arrive as a float
        for key in ('pkgver', 'pkgrel'):
            if key in data:
                data[key] = str(data[key])
        return data

    @staticmethod
    def _resolve(settings):
        base_dir = Path(settings['base_dir']).expanduser()
        return {
            'base_dir': base_dir,
            'repo_dir': base_dir / config_module.REPO_SUBDIR,
            'repo_db_name': config_module.REPO_DB_NAME,
            'log_file': base_dir / config_module.LOG_FILE,
            'failed_log': base_dir / config_module.FAILED_BUILDS_LOG,
            'success_log': base_dir / config_module.SUCCESSFUL_BUILDS_LOG,
            'state_file': base_dir / config_module.STATE_FILE,
            'pkgver': settings['pkgver'],
            'pkgrel': settings['pkgrel'],
            'arch': config_module.ARCH,
            'pkg_ext': config_module.PKG_EXT,
            'maintainer': config_module.MAINTAINER,
            'makepkg_flags': list(config_module.MAKEPKG_FLAGS),
            'makepkg_timeout': dict(config_module.MAKEPKG_TIMEOUT),
            'git_timeout': config_module.GIT_TIMEOUT,
            'pacman_timeout': config_module.PACMAN_TIMEOUT,
            'conflicting_packages': dict(config_module.CONFLICTING_PACKAGES),
            'required_tools': list(config_module.REQUIRED_TOOLS),
            'debug_mode': bool(settings['debug_mode']),
            'exclude_packages': list(settings['exclude_packages'] or []),
        }
