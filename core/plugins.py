from __future__ import annotations

from abc import ABC, abstractmethod


class BaseWidget(ABC):
    slug: str = ""
    label: str = ""
    template_name: str = ""
    form_template_name: str = ""

    def __init__(self, instance=None):
        self.instance = instance

    @property
    def widget_id(self) -> str:
        """DOM id of the rendered widget, also used to match per-widget search data."""
        pk = getattr(self.instance, "pk", None)
        if pk is None:
            return f"{self.slug}-new"
        return f"{self.slug}-{pk}"

    def field_name(self, key: str) -> str:
        return f"config_{key}"

    @property
    def media(self):
        from django import forms

        return forms.Media()

    @abstractmethod
    def render(self, config: dict, request=None) -> str: ...

    @abstractmethod
    def render_form(self, config: dict, request=None) -> str: ...

    @abstractmethod
    def update(self, new_config, old_config: dict) -> dict: ...


class BasePlugin:
    name: str = ""
    label: str = ""
    version: str = "1.0.0"
    description: str = ""

    def get_widget_types(self) -> list[type[BaseWidget]]:
        return []

    def get_admin_nav_items(self) -> list[dict]:
        """Items to inject into the admin sidebar.
        Each dict: {"label": str, "url_name": str, "icon": str (optional)}
        """
        return []


class PluginRegistry:
    def __init__(self):
        self._plugins: dict[str, BasePlugin] = {}

    def register(self, plugin: BasePlugin) -> None:
        self._plugins[plugin.name] = plugin

    def get_all_widget_types(self) -> list[type[BaseWidget]]:
        types = []
        for plugin in self._plugins.values():
            types.extend(plugin.get_widget_types())
        return types

    def get_widget_type(self, slug: str) -> type[BaseWidget] | None:
        for cls in self.get_all_widget_types():
            if cls.slug == slug:
                return cls
        return None

    def widget_choices(self) -> list[tuple[str, str]]:
        return [(cls.slug, cls.label) for cls in self.get_all_widget_types()]

    def get_admin_nav_items(self) -> list[dict]:
        items = []
        for plugin in self._plugins.values():
            items.extend(plugin.get_admin_nav_items())
        return items


registry = PluginRegistry()
