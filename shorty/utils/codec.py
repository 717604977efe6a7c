"""Base-61 identifier codec

This module converts identifiers to and from their compact text form. Each of
the three 32-bit identifier fields is rendered as a base-61 numeral and the
numerals are joined by the digit '0', which is left out of the alphabet.

Functions:
    b61_encode(value) -> str:
        Render a non-negative integer as a base-61 numeral without leading zero digits.
    b61_decode(numeral) -> int:
        Parse a base-61 numeral back into an integer.
    encode_identifier(timestamp_offset, origin_tag, sequence_counter) -> str:
        Render identifier fields as '<ts>0<origin>0<counter>'.
    decode_identifier(text) -> tuple[int, int, int]:
        Parse the text form back into identifier fields.

Example:
    >>> from shorty.utils.codec import encode_identifier, decode_identifier
    >>> encode_identifier(62, 4919, 0)
    'bb0btN0'
    >>> decode_identifier('bb0btN0')
    (62, 4919, 0)

NOTE:
    - A field with value 0 renders as an empty group, so the text form of an
      identifier with a zero timestamp would start with the separator. Such
      identifiers are invalid and render as INVALID_ID instead.
    - Decoding uses exact integer arithmetic (Horner's rule); there is no
      floating point anywhere in the codec.
"""

from shorty.constants import ALPHABET, SEPARATOR, INVALID_ID, UINT32_MAX
from shorty.exceptions import MalformedIdentifierError


BASE = len(ALPHABET)  # 61

# Digit lookup table, built once at import time
DECODER = {char: value for value, char in enumerate(ALPHABET)}


def b61_encode(value: int) -> str:
    """Encode a non-negative integer as a base-61 numeral.

    Args:
        value (int):
            Integer to encode. Zero encodes as an empty string.

    Returns:
        str: numeral, most significant digit first.

    Raises:
        ValueError: if value is negative.

    Example:
        >>> b61_encode(61)
        'ba'
        >>> b61_encode(0)
        ''
    """
    if value < 0:
        raise ValueError(f'Value must be a non-negative integer (given value: {value}).')

    digits = []
    while value > 0:
        value, digit = divmod(value, BASE)
        digits.append(ALPHABET[digit])
    return ''.join(reversed(digits))


def b61_decode(numeral: str) -> int:
    """Decode a base-61 numeral.

    Args:
        numeral (str):
            Base-61 numeral, most significant digit first. An empty string decodes to 0.

    Returns:
        int: decoded value.

    Raises:
        MalformedIdentifierError: if the numeral contains a character outside the alphabet.

    Example:
        >>> b61_decode('ba')
        61
    """
    value = 0
    for char in numeral:
        digit = DECODER.get(char)
        if digit is None:
            raise MalformedIdentifierError(f'{char!r} is not a base-61 digit.')
        value = value * BASE + digit
    return value


def encode_identifier(timestamp_offset: int, origin_tag: int, sequence_counter: int) -> str:
    """Render identifier fields as text.

    Returns INVALID_ID when timestamp_offset is 0.
    """
    if timestamp_offset == 0:
        return INVALID_ID
    return SEPARATOR.join(b61_encode(field) for field in (timestamp_offset, origin_tag, sequence_counter))


def decode_identifier(text: str) -> tuple[int, int, int]:
    """Parse the text form of an identifier.

    Args:
        text (str):
            Identifier text form, i.e. three base-61 groups separated by '0'.

    Returns:
        tuple[int, int, int]: (timestamp_offset, origin_tag, sequence_counter)

    Raises:
        MalformedIdentifierError:
            If the text does not split into exactly three groups, a group holds a
            character outside the alphabet, or a group overflows 32 bits.
    """
    if not isinstance(text, str):
        raise MalformedIdentifierError(f'Identifier must be of type string (given type: {type(text)}).')

    groups = text.split(SEPARATOR)
    if len(groups) != 3:
        raise MalformedIdentifierError(f'{text!r} is an invalid id.')

    try:
        fields = tuple(b61_decode(group) for group in groups)
    except MalformedIdentifierError as e:
        raise MalformedIdentifierError(f'{text!r} is an invalid id: {e}') from e

    if any(field > UINT32_MAX for field in fields):
        raise MalformedIdentifierError(f'{text!r} is an invalid id: field overflows 32 bits.')
    return fields
