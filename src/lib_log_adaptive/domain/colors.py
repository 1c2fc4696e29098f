"""Color space conversion from CSS-style expressions to ANSI escape codes.

Purpose
-------
Resolve the colour vocabulary used by themes and presets (hex literals,
``rgb()``/``rgba()`` triples, CSS named colours and ``linear-gradient``
expressions) into escape sequences for a chosen colour depth.

Contents
--------
* :class:`ColorCapability` - truecolor, 16-colour or no colour.
* :data:`CSS_NAMED_COLORS` - the CSS named-colour table.
* :func:`color_to_hex`, :func:`gradient_to_single_color` - normalisation.
* :func:`to_ansi`, :func:`nearest_basic_color` - emission.
* :data:`SGR` and :func:`sgr` - text attribute sequences.

System Role
-----------
Pure domain helpers consumed by the adaptive renderer and the console
adapter. Nothing here raises on malformed input: unknown colours resolve to
white so rendering always proceeds.

Alignment Notes
---------------
Terminals cannot draw gradients. A gradient is approximated by the
arithmetic mean of every colour stop it mentions; the approximation is
lossy on purpose.
"""

from __future__ import annotations

import math
import re
from enum import Enum


class ColorCapability(Enum):
    """Colour tier supported by an output target.

    Examples
    --------
    >>> ColorCapability.from_name('BASIC') is ColorCapability.BASIC
    True
    """

    FULL = "full"
    BASIC = "basic"
    NONE = "none"

    @classmethod
    def from_name(cls, name: str) -> "ColorCapability":
        normalized = name.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown color capability: {name!r}")


WHITE = "#ffffff"

CSS_NAMED_COLORS: dict[str, str] = {
    "aliceblue": "#f0f8ff",
    "antiquewhite": "#faebd7",
    "aqua": "#00ffff",
    "aquamarine": "#7fffd4",
    "azure": "#f0ffff",
    "beige": "#f5f5dc",
    "bisque": "#ffe4c4",
    "black": "#000000",
    "blanchedalmond": "#ffebcd",
    "blue": "#0000ff",
    "blueviolet": "#8a2be2",
    "brown": "#a52a2a",
    "burlywood": "#deb887",
    "cadetblue": "#5f9ea0",
    "chartreuse": "#7fff00",
    "chocolate": "#d2691e",
    "coral": "#ff7f50",
    "cornflowerblue": "#6495ed",
    "cornsilk": "#fff8dc",
    "crimson": "#dc143c",
    "cyan": "#00ffff",
    "darkblue": "#00008b",
    "darkcyan": "#008b8b",
    "darkgoldenrod": "#b8860b",
    "darkgray": "#a9a9a9",
    "darkgreen": "#006400",
    "darkkhaki": "#bdb76b",
    "darkmagenta": "#8b008b",
    "darkolivegreen": "#556b2f",
    "darkorange": "#ff8c00",
    "darkorchid": "#9932cc",
    "darkred": "#8b0000",
    "darksalmon": "#e9967a",
    "darkseagreen": "#8fbc8f",
    "darkslateblue": "#483d8b",
    "darkslategray": "#2f4f4f",
    "darkturquoise": "#00ced1",
    "darkviolet": "#9400d3",
    "deeppink": "#ff1493",
    "deepskyblue": "#00bfff",
    "dimgray": "#696969",
    "dodgerblue": "#1e90ff",
    "firebrick": "#b22222",
    "floralwhite": "#fffaf0",
    "forestgreen": "#228b22",
    "fuchsia": "#ff00ff",
    "gainsboro": "#dcdcdc",
    "ghostwhite": "#f8f8ff",
    "gold": "#ffd700",
    "goldenrod": "#daa520",
    "gray": "#808080",
    "green": "#008000",
    "greenyellow": "#adff2f",
    "honeydew": "#f0fff0",
    "hotpink": "#ff69b4",
    "indianred": "#cd5c5c",
    "indigo": "#4b0082",
    "ivory": "#fffff0",
    "khaki": "#f0e68c",
    "lavender": "#e6e6fa",
    "lavenderblush": "#fff0f5",
    "lawngreen": "#7cfc00",
    "lemonchiffon": "#fffacd",
    "lightblue": "#add8e6",
    "lightcoral": "#f08080",
    "lightcyan": "#e0ffff",
    "lightgoldenrodyellow": "#fafad2",
    "lightgray": "#d3d3d3",
    "lightgreen": "#90ee90",
    "lightpink": "#ffb6c1",
    "lightsalmon": "#ffa07a",
    "lightseagreen": "#20b2aa",
    "lightskyblue": "#87cefa",
    "lightslategray": "#778899",
    "lightsteelblue": "#b0c4de",
    "lightyellow": "#ffffe0",
    "lime": "#00ff00",
    "limegreen": "#32cd32",
    "linen": "#faf0e6",
    "magenta": "#ff00ff",
    "maroon": "#800000",
    "mediumaquamarine": "#66cdaa",
    "mediumblue": "#0000cd",
    "mediumorchid": "#ba55d3",
    "mediumpurple": "#9370db",
    "mediumseagreen": "#3cb371",
    "mediumslateblue": "#7b68ee",
    "mediumspringgreen": "#00fa9a",
    "mediumturquoise": "#48d1cc",
    "mediumvioletred": "#c71585",
    "midnightblue": "#191970",
    "mintcream": "#f5fffa",
    "mistyrose": "#ffe4e1",
    "moccasin": "#ffe4b5",
    "navajowhite": "#ffdead",
    "navy": "#000080",
    "oldlace": "#fdf5e6",
    "olive": "#808000",
    "olivedrab": "#6b8e23",
    "orange": "#ffa500",
    "orangered": "#ff4500",
    "orchid": "#da70d6",
    "palegoldenrod": "#eee8aa",
    "palegreen": "#98fb98",
    "paleturquoise": "#afeeee",
    "palevioletred": "#db7093",
    "papayawhip": "#ffefd5",
    "peachpuff": "#ffdab9",
    "peru": "#cd853f",
    "pink": "#ffc0cb",
    "plum": "#dda0dd",
    "powderblue": "#b0e0e6",
    "purple": "#800080",
    "rebeccapurple": "#663399",
    "red": "#ff0000",
    "rosybrown": "#bc8f8f",
    "royalblue": "#4169e1",
    "saddlebrown": "#8b4513",
    "salmon": "#fa8072",
    "sandybrown": "#f4a460",
    "seagreen": "#2e8b57",
    "seashell": "#fff5ee",
    "sienna": "#a0522d",
    "silver": "#c0c0c0",
    "skyblue": "#87ceeb",
    "slateblue": "#6a5acd",
    "slategray": "#708090",
    "snow": "#fffafa",
    "springgreen": "#00ff7f",
    "steelblue": "#4682b4",
    "tan": "#d2b48c",
    "teal": "#008080",
    "thistle": "#d8bfd8",
    "tomato": "#ff6347",
    "turquoise": "#40e0d0",
    "violet": "#ee82ee",
    "wheat": "#f5deb3",
    "white": "#ffffff",
    "whitesmoke": "#f5f5f5",
    "yellow": "#ffff00",
    "yellowgreen": "#9acd32",
}
"""CSS named colours keyed by lowercase name."""

CSS_NAMED_COLORS.update({name.replace("gray", "grey"): value for name, value in CSS_NAMED_COLORS.items() if "gray" in name})

# (foreground, background) SGR codes, standard then bright.
ANSI_16_COLORS: dict[str, tuple[tuple[int, int], tuple[int, int]]] = {
    "black": ((30, 40), (90, 100)),
    "red": ((31, 41), (91, 101)),
    "green": ((32, 42), (92, 102)),
    "yellow": ((33, 43), (93, 103)),
    "blue": ((34, 44), (94, 104)),
    "magenta": ((35, 45), (95, 105)),
    "cyan": ((36, 46), (96, 106)),
    "white": ((37, 47), (97, 107)),
    "gray": ((90, 100), (37, 47)),
    "grey": ((90, 100), (37, 47)),
}

_BASIC_PALETTE: tuple[tuple[str, tuple[int, int, int]], ...] = (
    ("black", (0, 0, 0)),
    ("red", (205, 0, 0)),
    ("green", (0, 205, 0)),
    ("yellow", (205, 205, 0)),
    ("blue", (0, 0, 238)),
    ("magenta", (205, 0, 205)),
    ("cyan", (0, 205, 205)),
    ("white", (229, 229, 229)),
)
# Reference RGB values of the eight standard terminal colours.

SGR: dict[str, str] = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "italic": "\x1b[3m",
    "underline": "\x1b[4m",
    "blink": "\x1b[5m",
    "reverse": "\x1b[7m",
    "hidden": "\x1b[8m",
    "strikethrough": "\x1b[9m",
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
_SHORT_HEX_RE = re.compile(r"^#([0-9a-fA-F])([0-9a-fA-F])([0-9a-fA-F])$")
_RGB_RE = re.compile(r"rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})")
_TOKEN_RE = re.compile(
    r"(?P<hex>#[0-9a-fA-F]{6}(?![0-9a-fA-F])|#[0-9a-fA-F]{3}(?![0-9a-fA-F]))"
    r"|(?P<rgb>rgba?\([^)]*\))"
    r"|(?P<word>[A-Za-z]+)"
)


def sgr(*names: str) -> str:
    """Concatenate the escape sequences for the given attribute names.

    Examples
    --------
    >>> sgr('bold', 'underline') == '\\x1b[1m\\x1b[4m'
    True
    """
    return "".join(SGR.get(name, "") for name in names)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_channel(value: float) -> int:
    return max(0, min(255, _round_half_up(value)))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse a 6-digit (or 3-digit shorthand) hex colour; invalid input is white.

    Examples
    --------
    >>> hex_to_rgb('#FF8000')
    (255, 128, 0)
    >>> hex_to_rgb('nope')
    (255, 255, 255)
    """
    text = value.strip()
    short = _SHORT_HEX_RE.match(text)
    if short:
        text = "#" + "".join(channel * 2 for channel in short.groups())
    match = _HEX_RE.match(text)
    if not match:
        return (255, 255, 255)
    red, green, blue = (int(channel, 16) for channel in match.groups())
    return (red, green, blue)


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    """Format channels (clamped to ``0..255``) as a lowercase ``#rrggbb`` string.

    Examples
    --------
    >>> rgb_to_hex(255, 0, 0)
    '#ff0000'
    >>> rgb_to_hex(300, -4, 16)
    '#ff0010'
    """
    return "#" + "".join(f"{_clamp_channel(channel):02x}" for channel in (red, green, blue))


def _token_to_hex(kind: str, token: str) -> str | None:
    if kind == "hex":
        return rgb_to_hex(*hex_to_rgb(token))
    if kind == "rgb":
        match = _RGB_RE.match(token)
        if match is None:
            return None
        return rgb_to_hex(*(int(channel) for channel in match.groups()))
    return CSS_NAMED_COLORS.get(token.lower())


def extract_color_tokens(expression: str) -> list[str]:
    """Return every colour mentioned in ``expression`` as hex, in order of appearance.

    Examples
    --------
    >>> extract_color_tokens('linear-gradient(135deg, #667eea 0%, rgb(118, 75, 162) 100%)')
    ['#667eea', '#764ba2']
    >>> extract_color_tokens('linear-gradient(to right, red, blue)')
    ['#ff0000', '#0000ff']
    """
    found: list[str] = []
    for match in _TOKEN_RE.finditer(expression):
        kind = match.lastgroup or ""
        resolved = _token_to_hex(kind, match.group(0))
        if resolved is not None:
            found.append(resolved)
    return found


def gradient_to_single_color(expression: str) -> str:
    """Average every colour stop of a gradient into one representative colour.

    Channels are averaged arithmetically and rounded half up. A gradient
    without recognisable stops resolves to white.

    Examples
    --------
    >>> gradient_to_single_color('linear-gradient(90deg, #000000, #ffffff)')
    '#808080'
    >>> gradient_to_single_color('linear-gradient(90deg, nothing)')
    '#ffffff'
    """
    stops = [hex_to_rgb(token) for token in extract_color_tokens(expression)]
    if not stops:
        return WHITE
    count = len(stops)
    return rgb_to_hex(
        sum(stop[0] for stop in stops) / count,
        sum(stop[1] for stop in stops) / count,
        sum(stop[2] for stop in stops) / count,
    )


def is_gradient(expression: str) -> bool:
    return "gradient(" in expression.lower()


def color_to_hex(expression: str | None) -> str:
    """Resolve any supported CSS colour expression to ``#rrggbb``.

    Malformed or unknown input never raises; it resolves to white.

    Examples
    --------
    >>> color_to_hex('rgb(255,0,0)')
    '#ff0000'
    >>> color_to_hex('RebeccaPurple')
    '#663399'
    >>> color_to_hex('#ABC')
    '#aabbcc'
    >>> color_to_hex('not-a-colour')
    '#ffffff'
    """
    if not expression:
        return WHITE
    text = expression.strip()
    if is_gradient(text):
        return gradient_to_single_color(text)
    if text.startswith("#"):
        return rgb_to_hex(*hex_to_rgb(text))
    named = CSS_NAMED_COLORS.get(text.lower())
    if named is not None:
        return named
    match = _RGB_RE.search(text)
    if match:
        return rgb_to_hex(*(int(channel) for channel in match.groups()))
    return WHITE


def nearest_basic_color(value: str) -> str:
    """Return the standard ANSI colour name closest to ``value`` in RGB space.

    Examples
    --------
    >>> nearest_basic_color('#ff0000')
    'red'
    >>> nearest_basic_color('#1e3a5f')
    'black'
    """
    red, green, blue = hex_to_rgb(color_to_hex(value))
    nearest = "white"
    best = math.inf
    for name, (ref_red, ref_green, ref_blue) in _BASIC_PALETTE:
        distance = math.sqrt((red - ref_red) ** 2 + (green - ref_green) ** 2 + (blue - ref_blue) ** 2)
        if distance < best:
            best = distance
            nearest = name
    return nearest


def to_ansi(expression: str | None, capability: ColorCapability, *, background: bool = False, bright: bool = False) -> str:
    """Return the escape sequence drawing ``expression`` at ``capability``.

    ``NONE`` always yields an empty string so callers never interpolate
    escape codes into plain output.

    Examples
    --------
    >>> to_ansi('#ff0000', ColorCapability.BASIC) == '\\x1b[31m'
    True
    >>> to_ansi('rgb(1, 2, 3)', ColorCapability.FULL, background=True) == '\\x1b[48;2;1;2;3m'
    True
    >>> to_ansi('red', ColorCapability.NONE)
    ''
    """
    if capability is ColorCapability.NONE or not expression:
        return ""
    if capability is ColorCapability.BASIC:
        name = expression.strip().lower()
        if name not in ANSI_16_COLORS:
            name = nearest_basic_color(expression)
        standard, brighter = ANSI_16_COLORS[name]
        foreground, back = brighter if bright else standard
        return f"\x1b[{back if background else foreground}m"
    red, green, blue = hex_to_rgb(color_to_hex(expression))
    return f"\x1b[{48 if background else 38};2;{red};{green};{blue}m"


__all__ = [
    "ANSI_16_COLORS",
    "CSS_NAMED_COLORS",
    "ColorCapability",
    "SGR",
    "WHITE",
    "color_to_hex",
    "extract_color_tokens",
    "gradient_to_single_color",
    "hex_to_rgb",
    "is_gradient",
    "nearest_basic_color",
    "rgb_to_hex",
    "sgr",
    "to_ansi",
]
