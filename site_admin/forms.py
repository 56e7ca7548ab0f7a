from django import forms
from django.core.exceptions import ValidationError
from django.utils.safestring import mark_safe

from core.plugins import registry
from widgets.areas import get_widget_areas
from widgets.models import WidgetInstance
from widgets.sanitize import getlist

CONFIG_PREFIX = "config_"


class WidgetInstanceForm(forms.Form):
    FIELD_CLASS = "mt-1 w-full rounded-2xl border border-[color:var(--admin-border)] bg-white px-3 py-2 text-sm shadow-sm focus:border-[color:var(--admin-accent)] focus:ring-[color:var(--admin-accent)]"

    widget_type = forms.ChoiceField(label="Widget type", choices=[])
    area = forms.ChoiceField(label="Area", choices=[])
    order = forms.IntegerField(label="Order", initial=0, min_value=0)
    is_active = forms.BooleanField(label="Active", required=False, initial=True)

    def __init__(self, *args, instance=None, request=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.instance = instance
        self.request = request

        self.fields["widget_type"].choices = registry.widget_choices()
        self.fields["area"].choices = [(a["slug"], a["label"]) for a in get_widget_areas()]

        # The selected widget type owns the config part of the form.
        selected_type = None
        if self.data:
            selected_type = self.data.get("widget_type")
        elif instance and instance.widget_type:
            selected_type = instance.widget_type

        if not selected_type and self.fields["widget_type"].choices:
            selected_type = self.fields["widget_type"].choices[0][0]

        self.bound_widget = None
        if selected_type:
            cls = registry.get_widget_type(selected_type)
            if cls:
                self.bound_widget = cls(instance=instance)

        if instance:
            self.fields["widget_type"].initial = instance.widget_type
            self.fields["area"].initial = instance.area
            self.fields["order"].initial = instance.order
            self.fields["is_active"].initial = instance.is_active

        for name, field in self.fields.items():
            if name == "is_active":
                continue
            field.widget.attrs.setdefault("class", self.FIELD_CLASS)

    @property
    def media(self):
        media = super().media
        if self.bound_widget is not None:
            media = media + self.bound_widget.media
        return media

    def _old_config(self) -> dict:
        if self.instance and isinstance(self.instance.config, dict):
            return self.instance.config
        return {}

    def submitted_config(self) -> dict:
        """Config keys posted by the widget's settings fragment, repeated fields kept as lists."""
        if not self.data:
            return {}
        config = {}
        for key in self.data.keys():
            if key.startswith(CONFIG_PREFIX):
                config[key[len(CONFIG_PREFIX):]] = getlist(self.data, key)
        return config

    def config_form_html(self) -> str:
        if self.bound_widget is None:
            return ""
        config = self._old_config()
        if self.is_bound:
            config = self.bound_widget.update(self.submitted_config(), config)
        return mark_safe(self.bound_widget.render_form(config, request=self.request))

    def clean_area(self):
        area = self.cleaned_data.get("area")
        valid_slugs = {a["slug"] for a in get_widget_areas()}
        if area not in valid_slugs:
            raise ValidationError(f"'{area}' is not a valid widget area.")
        return area

    def save_instance(self):
        """Save to a WidgetInstance, creating or updating as needed."""
        if self.instance and self.instance.pk:
            obj = self.instance
        else:
            obj = WidgetInstance()

        obj.widget_type = self.cleaned_data["widget_type"]
        obj.area = self.cleaned_data["area"]
        obj.order = self.cleaned_data["order"]
        obj.is_active = self.cleaned_data.get("is_active", True)
        if self.bound_widget is not None:
            obj.config = self.bound_widget.update(self.submitted_config(), self._old_config())
        obj.save()
        return obj
