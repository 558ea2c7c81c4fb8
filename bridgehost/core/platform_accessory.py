"""Persistable wrapper around a protocol accessory owned by a platform plugin."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from bridgehost.core.errors import AccessorySerializationError
from bridgehost.hap.accessory import Accessory, Categories, Service

OWNED_RECORD_KEYS = ("plugin", "platform", "context")


class PlatformAccessory:
    """Durable identity for one virtual device.

    Identity and services live on the wrapped protocol accessory; the
    ``display_name``, ``UUID`` and ``services`` attributes mirror it. Plugins
    keep their own data in ``context``, which is persisted verbatim together
    with the owning plugin and platform.
    """

    def __init__(self, display_name: str, uuid: str, category: Categories | None = None) -> None:
        self._bind(Accessory(display_name, uuid), category)

    @classmethod
    def _from_delegate(cls, delegate: Accessory) -> PlatformAccessory:
        accessory = cls.__new__(cls)
        accessory._bind(delegate, None)
        return accessory

    def _bind(self, delegate: Accessory, category: Categories | None) -> None:
        self.associated_plugin: str | None = None
        self.associated_platform: str | None = None
        self._associated_hap_accessory = delegate

        if category:
            delegate.category = category

        self.display_name = delegate.display_name
        self.UUID = delegate.UUID
        self.category = category or Categories.OTHER
        self.services: list[Service] = delegate.services
        self.context: dict[str, Any] = {}
        # reachability has no effect, kept for older plugins
        self.reachable = False

        self._identify_listeners: list[Callable[[], None]] = []
        delegate.on_identify(self._forward_identify)

    @property
    def hap_accessory(self) -> Accessory:
        return self._associated_hap_accessory

    def on_identify(self, listener: Callable[[], None]) -> None:
        self._identify_listeners.append(listener)

    def remove_identify_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._identify_listeners:
            self._identify_listeners.remove(listener)

    def _forward_identify(self, paired: bool, callback: Callable[[], None]) -> None:
        try:
            for listener in list(self._identify_listeners):
                listener()
        finally:
            callback()

    def update_display_name(self, name: str) -> None:
        if name:
            self.display_name = name
            self._associated_hap_accessory.display_name = name

    def add_service(self, service: Service | type[Service], *args: Any) -> Service:
        return self._associated_hap_accessory.add_service(service, *args)

    def remove_service(self, service: Service) -> None:
        self._associated_hap_accessory.remove_service(service)

    def get_service(self, name: str | type[Service]) -> Service | None:
        return self._associated_hap_accessory.get_service(name)

    def get_service_by_id(self, uuid: str | type[Service], subtype: str | None) -> Service | None:
        return self._associated_hap_accessory.get_service_by_id(uuid, subtype)

    def get_service_by_uuid_and_subtype(self, uuid: str | type[Service], subtype: str | None) -> Service | None:
        """Deprecated alias of :meth:`get_service_by_id`."""
        return self.get_service_by_id(uuid, subtype)

    def update_reachability(self, reachable: bool) -> None:
        """Deprecated: reachability has no effect and isn't supported anymore."""
        self.reachable = reachable

    def configure_controller(self, controller: Any) -> None:
        self._associated_hap_accessory.configure_controller(controller)

    def remove_controller(self, controller: Any) -> None:
        self._associated_hap_accessory.remove_controller(controller)

    @staticmethod
    def serialize(accessory: PlatformAccessory) -> dict[str, Any]:
        if accessory.associated_plugin is None:
            raise AccessorySerializationError(
                f"Accessory '{accessory.display_name}' ({accessory.UUID}) is not associated with a plugin"
            )
        if accessory.associated_platform is None:
            raise AccessorySerializationError(
                f"Accessory '{accessory.display_name}' ({accessory.UUID}) is not associated with a platform"
            )

        accessory._associated_hap_accessory.display_name = accessory.display_name
        delegate_record = Accessory.serialize(accessory._associated_hap_accessory)
        collisions = sorted(set(OWNED_RECORD_KEYS) & set(delegate_record))
        if collisions:
            raise AccessorySerializationError(
                f"Accessory record for {accessory.UUID} would overwrite reserved keys: {', '.join(collisions)}"
            )

        return {
            "plugin": accessory.associated_plugin,
            "platform": accessory.associated_platform,
            "context": accessory.context,
            **delegate_record,
        }

    @staticmethod
    def deserialize(record: dict[str, Any]) -> PlatformAccessory:
        delegate_record = {key: value for key, value in record.items() if key not in OWNED_RECORD_KEYS}
        delegate = Accessory.deserialize(delegate_record)

        accessory = PlatformAccessory._from_delegate(delegate)
        accessory.associated_plugin = record.get("plugin")
        accessory.associated_platform = record.get("platform")
        accessory.context = record.get("context") or {}
        accessory.category = Categories(record.get("category", Categories.OTHER))
        return accessory

    def __repr__(self) -> str:
        return f"PlatformAccessory(display_name={self.display_name!r}, UUID={self.UUID!r})"
