"""
Colour difference maths: sRGB -> CIELAB conversion and CIEDE2000
"""
import math
from typing import NamedTuple, Sequence


class Lab(NamedTuple):
    L: float
    A: float
    B: float


# Reference white (D65)
_WHITE_X = 0.95047
_WHITE_Y = 1.0
_WHITE_Z = 1.08883

_POW25_7 = 25 ** 7


def _expand_gamma(channel: float) -> float:
    channel /= 255
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _lab_f(t: float) -> float:
    if t > 0.008856:
        return t ** (1 / 3)
    return 7.787 * t + 16 / 116


def rgb_to_lab(rgb: Sequence[int]) -> Lab:
    """Convert an sRGB triple (0-255 per channel) to CIELAB"""
    r, g, b = (_expand_gamma(c) for c in rgb)

    x = (r * 0.4124 + g * 0.3576 + b * 0.1805) / _WHITE_X
    y = (r * 0.2126 + g * 0.7152 + b * 0.0722) / _WHITE_Y
    z = (r * 0.0193 + g * 0.1192 + b * 0.9505) / _WHITE_Z

    x, y, z = _lab_f(x), _lab_f(y), _lab_f(z)
    return Lab(116 * y - 16, 500 * (x - y), 200 * (y - z))


def _hue_angle(b: float, a_prime: float) -> float:
    if b == 0 and a_prime == 0:
        return 0.0
    angle = math.degrees(math.atan2(b, a_prime))
    return angle if angle >= 0 else angle + 360


def delta_e_2000(
    lab1: Lab,
    lab2: Lab,
    k_l: float = 1,
    k_c: float = 1,
    k_h: float = 1,
) -> float:
    """
    CIEDE2000 colour difference between two CIELAB colours

    Args:
        lab1, lab2: colours to compare
        k_l, k_c, k_h: lightness / chroma / hue weights

    Returns:
        Unrounded delta E (0 for identical colours, ~100 for black vs white)
    """
    delta_l_prime = lab2.L - lab1.L
    l_bar = (lab1.L + lab2.L) / 2

    c1 = math.hypot(lab1.A, lab1.B)
    c2 = math.hypot(lab2.A, lab2.B)
    c_bar = (c1 + c2) / 2

    g = 1 - math.sqrt(c_bar ** 7 / (c_bar ** 7 + _POW25_7))
    a_prime1 = lab1.A + lab1.A / 2 * g
    a_prime2 = lab2.A + lab2.A / 2 * g

    c_prime1 = math.hypot(a_prime1, lab1.B)
    c_prime2 = math.hypot(a_prime2, lab2.B)
    c_bar_prime = (c_prime1 + c_prime2) / 2
    delta_c_prime = c_prime2 - c_prime1

    s_l = 1 + (0.015 * (l_bar - 50) ** 2) / math.sqrt(20 + (l_bar - 50) ** 2)
    s_c = 1 + 0.045 * c_bar_prime

    h_prime1 = _hue_angle(lab1.B, a_prime1)
    h_prime2 = _hue_angle(lab2.B, a_prime2)

    # Hue difference is irrelevant when either colour is achromatic
    if c1 == 0 or c2 == 0:
        delta_h_prime = 0.0
    elif abs(h_prime1 - h_prime2) <= 180:
        delta_h_prime = h_prime2 - h_prime1
    elif h_prime2 <= h_prime1:
        delta_h_prime = h_prime2 - h_prime1 + 360
    else:
        delta_h_prime = h_prime2 - h_prime1 - 360

    delta_big_h_prime = (
        2 * math.sqrt(c_prime1 * c_prime2) * math.sin(math.radians(delta_h_prime) / 2)
    )

    if abs(h_prime1 - h_prime2) > 180:
        h_bar_prime = (h_prime1 + h_prime2 + 360) / 2
    else:
        h_bar_prime = (h_prime1 + h_prime2) / 2

    t = (
        1
        - 0.17 * math.cos(math.radians(h_bar_prime - 30))
        + 0.24 * math.cos(math.radians(2 * h_bar_prime))
        + 0.32 * math.cos(math.radians(3 * h_bar_prime + 6))
        - 0.2 * math.cos(math.radians(4 * h_bar_prime - 63))
    )
    s_h = 1 + 0.015 * c_bar_prime * t

    r_t = (
        -2
        * math.sqrt(c_bar_prime ** 7 / (c_bar_prime ** 7 + _POW25_7))
        * math.sin(math.radians(60 * math.exp(-(((h_bar_prime - 275) / 25) ** 2))))
    )

    lightness = delta_l_prime / (k_l * s_l)
    chroma = delta_c_prime / (k_c * s_c)
    hue = delta_big_h_prime / (k_h * s_h)

    return math.sqrt(lightness ** 2 + chroma ** 2 + hue ** 2 + r_t * chroma * hue)


def get_diff(rgb1: Sequence[int], rgb2: Sequence[int]) -> float:
    """Perceptual distance between two sRGB colours, rounded to 2 decimals"""
    # Half-up rounding, not round()'s half-to-even
    return math.floor(delta_e_2000(rgb_to_lab(rgb1), rgb_to_lab(rgb2)) * 100 + 0.5) / 100
