from enum import StrEnum


class PreferenceType(StrEnum):
    WINDOW = 'window'
    AISLE = 'aisle'
    MIDDLE = 'middle'
    ANY = 'any'
