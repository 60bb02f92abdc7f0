MONTH_ABBREVIATIONS = {
    1: "Янв",
    2: "Фев",
    3: "Мар",
    4: "Апр",
    5: "Май",
    6: "Июн",
    7: "Июл",
    8: "Авг",
    9: "Сен",
    10: "Окт",
    11: "Ноя",
    12: "Дек",
}

UNKNOWN_MONTH = "???"


def month_abbreviation(month: int) -> str:
    """Three-letter month name, or '???' outside 1-12"""
    return MONTH_ABBREVIATIONS.get(month, UNKNOWN_MONTH)
