"""Settings library for the expense feed configuration.

Provides:
    - Schema validation and enforcement for settings.json structure.
    - Loading, saving and reverting application settings.
    - Constants for sort fields, sort directions and export columns.
"""

import json
import logging
import os
import pathlib
import shutil
from typing import Dict, Any, Optional, List

from PySide6 import QtCore

from ..status import status

app_name: str = 'ExpenseFeed'

CONFIG_DIR_ENV_KEY: str = 'EXPENSEFEED_CONFIG_DIR'

SORT_FIELDS: List[str] = ['date', 'amount', 'category']
SORT_DIRECTIONS: List[str] = ['asc', 'desc']
EXPORT_COLUMNS: List[str] = ['Date', 'Amount', 'Description', 'Category']

SETTINGS_SCHEMA: Dict[str, Any] = {
    'remote': {
        'type': dict,
        'required': True,
        'item_schema': {
            'collection': {'type': str, 'required': True},
        }
    },
    'view': {
        'type': dict,
        'required': True,
        'item_schema': {
            'page_size': {'type': int, 'required': True, 'minimum': 1},
            'sort_field': {'type': str, 'required': True, 'allowed_values': SORT_FIELDS},
            'sort_direction': {'type': str, 'required': True, 'allowed_values': SORT_DIRECTIONS},
        }
    },
    'locale': {
        'type': dict,
        'required': True,
        'item_schema': {
            'locale': {'type': str, 'required': True},
            'date_format': {'type': str, 'required': True},
        }
    },
    'export': {
        'type': dict,
        'required': True,
        'item_schema': {
            'filename_prefix': {'type': str, 'required': True},
        }
    },
}


def _validate_section(section_name: str, section: Dict[str, Any], item_schema: Dict[str, Any]) -> None:
    """Validate a single settings section against its item schema.

    Args:
        section_name: Name of the section, used in error messages.
        section: The section data.
        item_schema: Mapping of field names to their type and value constraints.

    Raises:
        TypeError: If the section or one of its fields has the wrong type.
        ValueError: If a required field is missing or a value is out of range.
    """
    logging.debug(f'Validating "{section_name}" section.')
    if not isinstance(section, dict):
        msg: str = f'"{section_name}" must be a dict.'
        logging.error(msg)
        raise TypeError(msg)

    for field, field_specs in item_schema.items():
        if field_specs['required'] and field not in section:
            msg = f'Section "{section_name}" missing "{field}".'
            logging.error(msg)
            raise ValueError(msg)
        if field not in section:
            continue

        value = section[field]
        # bool is an int subclass; never accept it for numeric fields
        if not isinstance(value, field_specs['type']) or (
                field_specs['type'] is int and isinstance(value, bool)):
            msg = (
                f'Section "{section_name}" field "{field}" must be {field_specs["type"]}, '
                f'got {type(value)}.'
            )
            logging.error(msg)
            raise TypeError(msg)
        if 'allowed_values' in field_specs and value not in field_specs['allowed_values']:
            msg = f'Section "{section_name}" field "{field}" must be one of {field_specs["allowed_values"]}.'
            logging.error(msg)
            raise ValueError(msg)
        if 'minimum' in field_specs and value < field_specs['minimum']:
            msg = f'Section "{section_name}" field "{field}" must be at least {field_specs["minimum"]}.'
            logging.error(msg)
            raise ValueError(msg)
        if field_specs['type'] is str and field_specs['required'] and not value.strip():
            msg = f'Section "{section_name}" field "{field}" must not be empty.'
            logging.error(msg)
            raise ValueError(msg)


class ConfigPaths:
    """Manage application file paths and ensure the default template is in place.

    The config directory defaults to ``<AppDataLocation>/config`` and can be
    redirected with the ``EXPENSEFEED_CONFIG_DIR`` environment variable.
    """

    def __init__(self) -> None:
        QtCore.QCoreApplication.setApplicationName(app_name)
        QtCore.QCoreApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        override = os.environ.get(CONFIG_DIR_ENV_KEY)
        if override:
            self.config_dir: pathlib.Path = pathlib.Path(override)
        else:
            p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
            self.config_dir = pathlib.Path(p) / 'config'
        logging.debug(f'Using config directory: {self.config_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.settings_template: pathlib.Path = self.template_dir / 'settings.json.template'
        self.settings_path: pathlib.Path = self.config_dir / 'settings.json'

        p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.DownloadLocation)
        self.export_dir: pathlib.Path = pathlib.Path(p) if p else self.config_dir

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify the template exists and seed the settings file from it.

        Raises:
            FileNotFoundError: If the settings template is missing.
        """
        if not self.settings_template.exists():
            msg: str = f'Missing settings template: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)

        if not self.config_dir.exists():
            logging.debug(f'Creating config directory: {self.config_dir}')
            self.config_dir.mkdir(parents=True, exist_ok=True)

        if not self.settings_path.exists():
            logging.debug(f'Copying default settings from template to {self.settings_path}')
            shutil.copy(self.settings_template, self.settings_path)

    def revert_to_template(self) -> None:
        """Restore settings.json from the default template file.

        Raises:
            FileNotFoundError: If the settings template file is missing.
        """
        logging.debug(f'Reverting settings to template: {self.settings_template}')
        if not self.settings_template.exists():
            msg: str = f'Settings template not found: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        shutil.copy(self.settings_template, self.settings_path)


class SettingsAPI(ConfigPaths):
    """
    Provides an interface to get/set/revert/save settings.json sections.
    """

    def __init__(self, settings_path: Optional[str] = None) -> None:
        """Initialize SettingsAPI and load the settings data.

        Args:
            settings_path: Optional path to a custom settings.json file.
        """
        super().__init__()

        if settings_path:
            self.settings_path = pathlib.Path(settings_path)
            if not self.settings_path.exists():
                self.settings_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy(self.settings_template, self.settings_path)

        self.data: Dict[str, Any] = {k: {} for k in SETTINGS_SCHEMA}
        self.load()

    def load(self) -> Dict[str, Any]:
        """Load settings.json from disk and validate against schema.

        Returns:
            The loaded settings dictionary.

        Raises:
            status.SettingsNotFoundException: If settings.json file is missing.
            status.SettingsInvalidException: If JSON parsing or validation fails.
        """
        logging.debug(f'Loading settings from "{self.settings_path}"')
        if not self.settings_path.exists():
            raise status.SettingsNotFoundException(str(self.settings_path))

        try:
            with self.settings_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
            self.validate(data)
        except (ValueError, TypeError) as ex:
            raise status.SettingsInvalidException(str(ex)) from ex

        self.data = data
        return self.data

    def validate(self, data: Optional[Dict[str, Any]] = None) -> None:
        """Validate settings data against SETTINGS_SCHEMA.

        Args:
            data (dict, optional): Settings data to validate. Defaults to the loaded data.

        Raises:
            ValueError: If a required section or field is missing, or a value is not allowed.
            TypeError: If a section or field has the wrong type.
        """
        if data is None:
            data = self.data
        if not isinstance(data, dict) or not data:
            raise ValueError('Settings data is empty.')

        for section_name, specs in SETTINGS_SCHEMA.items():
            if specs['required'] and section_name not in data:
                raise ValueError(f'Missing required section: {section_name}')
            if section_name not in data:
                continue
            if not isinstance(data[section_name], specs['type']):
                raise TypeError(
                    f'Section "{section_name}" must be {specs["type"]}, got {type(data[section_name])}.'
                )
            _validate_section(section_name, data[section_name], specs['item_schema'])

        logging.debug('Settings data is valid.')

    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Retrieve a copy of a settings section.

        Raises:
            KeyError: If section_name is not a known section.
        """
        return self.data[section_name].copy()

    def set_section(self, section_name: str, new_data: Dict[str, Any]) -> None:
        """Replace, validate and persist a settings section.

        Args:
            section_name: Section to update.
            new_data: New data dict for the section.

        Raises:
            ValueError: If section_name is unknown or new_data fails validation.
            TypeError: If new_data has the wrong shape.
        """
        if section_name not in SETTINGS_SCHEMA:
            raise ValueError(f'Unknown settings section: {section_name}')

        _validate_section(section_name, new_data, SETTINGS_SCHEMA[section_name]['item_schema'])
        self.data[section_name] = dict(new_data)
        self.save()

        from ..signals import signals
        signals.configSectionChanged.emit(section_name)

    def revert_section(self, section_name: str) -> None:
        """Restore a single section from the packaged template and persist it."""
        logging.debug(f'Reverting section "{section_name}" to template.')
        with self.settings_template.open('r', encoding='utf-8') as f:
            template: Dict[str, Any] = json.load(f)
        if section_name not in template:
            raise ValueError(f'Section "{section_name}" is not present in the template.')
        self.set_section(section_name, template[section_name])

    def save(self) -> None:
        """Validate and write the settings to disk."""
        try:
            self.validate()
        except (ValueError, TypeError) as e:
            logging.error(f'Failed to save settings: {e}')
            raise

        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with self.settings_path.open('w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=4, ensure_ascii=False)


settings: SettingsAPI = SettingsAPI()
