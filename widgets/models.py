from django.db import models


class WidgetInstance(models.Model):
    widget_type = models.CharField(max_length=64)
    area = models.CharField(max_length=64)
    order = models.PositiveIntegerField(default=0)
    config = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["area", "order", "pk"]

    def __str__(self):
        return f"{self.widget_type} in {self.area} (order={self.order})"

    def get_widget(self):
        """Bound widget type for this instance, or None if its plugin is gone."""
        from core.plugins import registry

        cls = registry.get_widget_type(self.widget_type)
        if cls is None:
            return None
        return cls(instance=self)
