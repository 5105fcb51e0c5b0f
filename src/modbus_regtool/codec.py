"""16-bit register byte-order transform, applied on read (wire -> display) and write (display -> wire)."""

from .types import Endianness


class EndiannessCodec:
    """
    Swap the two bytes of a register word when the configured order is LITTLE.

    The transform is its own inverse, so the same ``convert`` maps raw reads to
    display form and operator-entered values back to wire form.
    """

    def __init__(self, mode: Endianness = Endianness.BIG) -> None:
        self._mode = mode

    @property
    def mode(self) -> Endianness:
        return self._mode

    def convert(self, value: int) -> int:
        if self._mode == Endianness.LITTLE:
            low = value & 0xFF
            high = (value >> 8) & 0xFF
            return (low << 8) | high
        return value
