"""Protocol accessory model handed to plugins through the host API."""

from bridgehost.hap.accessory import (
    Accessory,
    AccessoryInformation,
    Categories,
    Lightbulb,
    Outlet,
    Service,
    Switch,
    TemperatureSensor,
    generate_uuid,
    is_valid_uuid,
)

__all__ = [
    "Accessory",
    "AccessoryInformation",
    "Categories",
    "Lightbulb",
    "Outlet",
    "Service",
    "Switch",
    "TemperatureSensor",
    "generate_uuid",
    "is_valid_uuid",
]
