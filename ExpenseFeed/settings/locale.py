"""
Module for formatting dates and currency values using Babel, and for
locale-aware string collation using Qt.

"""
import datetime
import logging

from PySide6 import QtCore
from babel import Locale, numbers
from babel.dates import format_date as babel_format_date

DEFAULT_LOCALE: str = 'nl_NL'

CURRENCY_MAP: dict[str, str] = {
    'US': 'USD',
    'GB': 'GBP',
    'DE': 'EUR',
    'FR': 'EUR',
    'BE': 'EUR',
    'IT': 'EUR',
    'ES': 'EUR',
    'JP': 'JPY',
    'CA': 'CAD',
    'AU': 'AUD',
    'IN': 'INR',
    'BR': 'BRL',
    'DK': 'DKK',
    'SE': 'SEK',
    'NO': 'NOK',
    'FI': 'EUR',
    'HU': 'HUF',
    'MX': 'MXN',
    'ZA': 'ZAR',
    'NL': 'EUR',
}


def get_currency_from_locale(locale: str) -> str:
    """
    Retrieve the default currency code based on the locale's territory.

    Args:
        locale (str): Locale string, e.g. 'fr_FR'.

    Returns:
        str: Currency code such as 'EUR'. Defaults to 'EUR' if the territory is unknown.
    """
    parts = locale.split('_')
    if len(parts) < 2:
        return 'EUR'
    country_code = parts[1]
    return CURRENCY_MAP.get(country_code, 'EUR')


def format_currency_value(value: float, locale: str) -> str:
    """
    Format a float as a currency string based on the locale's default currency.

    Args:
        value (float): The numeric value to be formatted.
        locale (str): Locale string, e.g. 'fr_FR'.

    Returns:
        str: The formatted currency string.
    """
    try:
        currency_code = get_currency_from_locale(locale)
        locale_obj = Locale.parse(locale)
        return numbers.format_currency(value, currency=currency_code, locale=locale_obj)
    except (ValueError, TypeError) as e:
        logging.debug(f'Error formatting currency: {e}')
        return f'{value:.2f}'


def format_date(value: datetime.date, locale: str, date_format: str = 'short') -> str:
    """
    Format a calendar date for the given locale.

    Args:
        value (datetime.date): The date to format.
        locale (str): Locale string, e.g. 'nl_NL'.
        date_format (str): One of babel's named formats ('short', 'medium', 'long', 'full')
            or an explicit CLDR pattern such as 'd-M-yyyy'.

    Returns:
        str: The formatted date.
    """
    return babel_format_date(value, format=date_format, locale=Locale.parse(locale))


def get_collator(locale: str) -> QtCore.QCollator:
    """
    Return a collator comparing strings by the rules of the given locale.

    Args:
        locale (str): Locale string, e.g. 'nl_NL'.

    Returns:
        QtCore.QCollator: A collator for the locale with Qt's default strength.
    """
    return QtCore.QCollator(QtCore.QLocale(locale))
