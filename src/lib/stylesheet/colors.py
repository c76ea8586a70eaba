"""
Color rendering and number formatting for stylesheet output
"""

import re

from ...models.css import CSSColor

RE_TRAILING_ZEROS = re.compile(r'\.?0+$')


def frac(num: float, digits: int = 4) -> str:
    """
    Format number with at most `digits` decimals, dropping trailing zeros

    Example:
        >>> frac(0.5), frac(10.0), frac(1.23456)
        ('0.5', '10', '1.2346')
    """
    return RE_TRAILING_ZEROS.sub('', f"{num:.{digits}f}", count=1)


def color(token: CSSColor, short_hex: bool = False) -> str:
    """
    Render color token

    Fully transparent black renders as `transparent`, opaque colors as hex
    (three-digit when `short_hex` allows), anything else as `rgba()`.

    Example:
        >>> color(CSSColor(255, 255, 255), short_hex=True)
        '#fff'
    """
    if not token.r and not token.g and not token.b and not token.a:
        return 'transparent'
    if token.a == 1:
        return hex_as(token, short_hex)
    return rgb_as(token)


def hex_as(token: CSSColor, short: bool) -> str:
    channels = (token.r, token.g, token.b)
    if short and all(c % 17 == 0 for c in channels):
        return '#' + ''.join(format(c >> 4, 'x') for c in channels)
    return '#' + ''.join(format(c, '02x') for c in channels)


def rgb_as(token: CSSColor) -> str:
    values = [str(token.r), str(token.g), str(token.b)]
    if token.a != 1:
        values.append(frac(token.a, 8))
    return f"{'rgb' if len(values) == 3 else 'rgba'}({', '.join(values)})"
