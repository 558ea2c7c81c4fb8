"""Minimal protocol-level accessory used as the default platform accessory delegate."""

from __future__ import annotations

import hashlib
import uuid as uuid_lib
from collections.abc import Callable
from enum import IntEnum
from typing import Any

IdentifyListener = Callable[[bool, Callable[[], None]], None]


class Categories(IntEnum):
    OTHER = 1
    BRIDGE = 2
    FAN = 3
    GARAGE_DOOR_OPENER = 4
    LIGHTBULB = 5
    DOOR_LOCK = 6
    OUTLET = 7
    SWITCH = 8
    THERMOSTAT = 9
    SENSOR = 10
    SECURITY_SYSTEM = 11
    DOOR = 12
    WINDOW = 13
    WINDOW_COVERING = 14
    PROGRAMMABLE_SWITCH = 15
    RANGE_EXTENDER = 16
    IP_CAMERA = 17
    VIDEO_DOORBELL = 18
    AIR_PURIFIER = 19
    AIR_HEATER = 20
    AIR_CONDITIONER = 21
    AIR_HUMIDIFIER = 22
    AIR_DEHUMIDIFIER = 23
    APPLE_TV = 24
    HOMEPOD = 25
    SPEAKER = 26
    AIRPORT = 27
    SPRINKLER = 28
    FAUCET = 29
    SHOWER_HEAD = 30
    TELEVISION = 31
    TARGET_CONTROLLER = 32
    ROUTER = 33
    AUDIO_RECEIVER = 34
    TV_SET_TOP_BOX = 35
    TV_STREAMING_STICK = 36


def generate_uuid(data: str) -> str:
    """Derive a stable accessory UUID from an arbitrary string, e.g. a device serial."""
    digest = hashlib.sha1(data.encode("utf-8")).hexdigest()
    return str(uuid_lib.UUID(digest[:32]))


def is_valid_uuid(value: str) -> bool:
    try:
        uuid_lib.UUID(value)
    except (TypeError, ValueError, AttributeError):
        return False
    return True


class Service:
    UUID: str = ""

    def __init__(self, display_name: str = "", uuid: str | None = None, subtype: str | None = None) -> None:
        self.display_name = display_name
        self.UUID = uuid or type(self).UUID
        if not self.UUID:
            raise ValueError("Service requires a UUID")
        self.subtype = subtype
        self.characteristics: dict[str, Any] = {}

    def set_characteristic(self, name: str, value: Any) -> Service:
        self.characteristics[name] = value
        return self

    def get_characteristic(self, name: str) -> Any:
        return self.characteristics.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "displayName": self.display_name,
            "UUID": self.UUID,
            "subtype": self.subtype,
            "characteristics": dict(self.characteristics),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Service:
        service = cls(data.get("displayName", ""), data["UUID"], data.get("subtype"))
        service.characteristics.update(data.get("characteristics") or {})
        return service

    def __repr__(self) -> str:
        return f"{type(self).__name__}(display_name={self.display_name!r}, UUID={self.UUID!r}, subtype={self.subtype!r})"


class AccessoryInformation(Service):
    UUID = "0000003E-0000-1000-8000-0026BB765291"


class Lightbulb(Service):
    UUID = "00000043-0000-1000-8000-0026BB765291"


class Outlet(Service):
    UUID = "00000047-0000-1000-8000-0026BB765291"


class Switch(Service):
    UUID = "00000049-0000-1000-8000-0026BB765291"


class TemperatureSensor(Service):
    UUID = "0000008A-0000-1000-8000-0026BB765291"


def _service_uuid(target: str | type[Service]) -> str:
    return target.UUID if isinstance(target, type) else target


class Accessory:
    """Protocol accessory: identity, an ordered service list, and identify notifications."""

    def __init__(self, display_name: str, uuid: str) -> None:
        if not display_name:
            raise ValueError("Accessories must be created with a non-empty display name")
        if not is_valid_uuid(uuid):
            raise ValueError(f"'{uuid}' is not a valid UUID")

        self.display_name = display_name
        self.UUID = uuid
        self.category = Categories.OTHER
        self.services: list[Service] = []
        self.controllers: list[Any] = []
        self._identify_listeners: list[IdentifyListener] = []

        self.add_service(AccessoryInformation(display_name))

    def add_service(self, service: Service | type[Service], *args: Any) -> Service:
        if isinstance(service, type):
            service = service(*args)
        for existing in self.services:
            if existing.UUID == service.UUID and existing.subtype == service.subtype:
                raise ValueError(
                    f"Cannot add a service with the same UUID '{service.UUID}' and subtype "
                    f"'{service.subtype}' as another service in accessory '{self.display_name}'"
                )
        self.services.append(service)
        return service

    def remove_service(self, service: Service) -> None:
        if service in self.services:
            self.services.remove(service)

    def get_service(self, name: str | type[Service]) -> Service | None:
        for service in self.services:
            if isinstance(name, str) and service.display_name == name:
                return service
            if isinstance(name, type) and service.UUID == name.UUID:
                return service
        return None

    def get_service_by_id(self, uuid: str | type[Service], subtype: str | None) -> Service | None:
        wanted = _service_uuid(uuid)
        for service in self.services:
            if service.UUID == wanted and service.subtype == subtype:
                return service
        return None

    def configure_controller(self, controller: Any) -> None:
        if isinstance(controller, type):
            controller = controller()
        if controller not in self.controllers:
            self.controllers.append(controller)

    def remove_controller(self, controller: Any) -> None:
        if controller in self.controllers:
            self.controllers.remove(controller)

    def on_identify(self, listener: IdentifyListener) -> None:
        self._identify_listeners.append(listener)

    def identify(self, paired: bool, callback: Callable[[], None]) -> None:
        if not self._identify_listeners:
            callback()
            return
        for listener in list(self._identify_listeners):
            listener(paired, callback)

    @staticmethod
    def serialize(accessory: Accessory) -> dict[str, Any]:
        return {
            "displayName": accessory.display_name,
            "UUID": accessory.UUID,
            "category": int(accessory.category),
            "services": [service.to_dict() for service in accessory.services],
        }

    @staticmethod
    def deserialize(record: dict[str, Any]) -> Accessory:
        accessory = Accessory(record["displayName"], record["UUID"])
        accessory.category = Categories(record.get("category", Categories.OTHER))
        accessory.services = [Service.from_dict(data) for data in record.get("services", [])]
        return accessory
