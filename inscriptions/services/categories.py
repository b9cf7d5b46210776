from flask import current_app


def get_category_rules(rules=None):
    """Category table ``{category: {min_age, max_age, display_name}}``.

    Defaults to the CATEGORY_RULES of the running app.
    """
    if rules is not None:
        return rules
    return current_app.config['CATEGORY_RULES']


def normalize_category(value):
    return (value or '').strip().lower()


def display_name(category, rules=None):
    rule = get_category_rules(rules).get(category)
    return rule['display_name'] if rule else category
