"""
Static catalog of device emulation profiles.

Devices are audited in the order they appear here.
"""

from typing import Iterable

from .models import DeviceDescriptor, Viewport

_IOS_14_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.0 Mobile/15E148 Safari/604.1"
)
_IOS_16_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.0 Mobile/15E148 Safari/604.1"
)
_PIXEL_5_UA = (
    "Mozilla/5.0 (Linux; Android 11; Pixel 5) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.101 Mobile Safari/537.36"
)
_GALAXY_S20_UA = (
    "Mozilla/5.0 (Linux; Android 10; SAMSUNG SM-G980F) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/83.0.4103.106 Mobile Safari/537.36"
)
_IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 14_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.0 Safari/604.1"
)
_WINDOWS_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
_MAC_CHROME_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


def _mobile(width: int, height: int, scale: float) -> Viewport:
    return Viewport(width, height, device_scale_factor=scale, is_mobile=True, has_touch=True)


DEVICES: tuple[DeviceDescriptor, ...] = (
    # Mobile devices
    DeviceDescriptor("iPhone 12", _mobile(390, 844, 3), _IOS_14_UA),
    DeviceDescriptor("iPhone 14 Pro", _mobile(430, 932, 3), _IOS_16_UA),
    DeviceDescriptor("Pixel 5", _mobile(393, 851, 3), _PIXEL_5_UA),
    DeviceDescriptor("Samsung Galaxy S20", _mobile(412, 915, 3), _GALAXY_S20_UA),
    DeviceDescriptor("iPad Pro 12.9", _mobile(1024, 1366, 2), _IPAD_UA),
    # Desktop variations
    DeviceDescriptor("Desktop 1920x1080", Viewport(1920, 1080), _WINDOWS_CHROME_UA),
    DeviceDescriptor("Desktop 1366x768", Viewport(1366, 768), _WINDOWS_CHROME_UA),
    DeviceDescriptor("Desktop 1440x900", Viewport(1440, 900), _MAC_CHROME_UA),
    DeviceDescriptor("Desktop 1536x864", Viewport(1536, 864), _WINDOWS_CHROME_UA),
    DeviceDescriptor("Desktop 1280x1024", Viewport(1280, 1024), _WINDOWS_CHROME_UA),
    DeviceDescriptor("Desktop 1600x900", Viewport(1600, 900), _WINDOWS_CHROME_UA),
    DeviceDescriptor("Desktop 2560x1440", Viewport(2560, 1440), _MAC_CHROME_UA),
    DeviceDescriptor("Desktop 3840x2160 (4K)", Viewport(3840, 2160), _WINDOWS_CHROME_UA),
    DeviceDescriptor("Desktop 7680x4320 (8K)", Viewport(7680, 4320), _WINDOWS_CHROME_UA),
)


def get_devices(names: Iterable[str] | None = None) -> tuple[DeviceDescriptor, ...]:
    """
    Return the device catalog, optionally restricted to the given names.

    The result always follows catalog order, regardless of the order of ``names``.

    Args:
        names: Device names to keep (optional)

    Returns:
        Tuple of device descriptors

    Raises:
        ValueError: If a name does not match any device in the catalog
    """
    if names is None:
        return DEVICES

    wanted = set(names)
    known = {device.name for device in DEVICES}
    unknown = sorted(wanted - known)
    if unknown:
        raise ValueError(f"Unknown device(s): {', '.join(unknown)}")

    return tuple(device for device in DEVICES if device.name in wanted)
