import logging

from django import template
from django.utils.safestring import mark_safe

register = template.Library()
logger = logging.getLogger(__name__)


@register.simple_tag(takes_context=True)
def render_widget_area(context, area_slug: str) -> str:
    from widgets.areas import is_widget_area
    from widgets.models import WidgetInstance

    if not is_widget_area(area_slug):
        return ""

    request = context.get("request")
    instances = WidgetInstance.objects.filter(area=area_slug, is_active=True).order_by("order", "pk")
    parts = []
    for inst in instances:
        widget = inst.get_widget()
        if widget is None:
            continue
        try:
            parts.append(widget.render(inst.config or {}, request=request))
        except Exception:
            logger.exception(
                "Widget %s pk=%s failed to render", inst.widget_type, inst.pk
            )
    return mark_safe("".join(parts))
