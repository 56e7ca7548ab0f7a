import logging

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect, render

from core.plugins import registry
from widgets.models import WidgetInstance

from .decorators import staff_required
from .forms import WidgetInstanceForm

logger = logging.getLogger(__name__)


def _nav_items():
    return registry.get_admin_nav_items()


@staff_required
def widget_list(request):
    labels = dict(registry.widget_choices())
    widgets = [
        {"instance": inst, "label": labels.get(inst.widget_type, inst.widget_type)}
        for inst in WidgetInstance.objects.all()
    ]
    return render(
        request,
        "site_admin/widget_list.html",
        {"widgets": widgets, "nav_items": _nav_items()},
    )


def _widget_form(request, instance=None):
    form = WidgetInstanceForm(request.POST or None, instance=instance, request=request)
    if request.method == "POST" and form.is_valid():
        obj = form.save_instance()
        logger.info("Saved widget %s pk=%s in %s", obj.widget_type, obj.pk, obj.area)
        messages.success(request, "Widget saved.")
        return redirect("site_admin:widget_edit", pk=obj.pk)

    return render(
        request,
        "site_admin/widget_form.html",
        {"form": form, "instance": instance, "nav_items": _nav_items()},
    )


@staff_required
def widget_create(request):
    return _widget_form(request)


@staff_required
def widget_edit(request, pk):
    instance = get_object_or_404(WidgetInstance, pk=pk)
    return _widget_form(request, instance=instance)


@staff_required
def widget_delete(request, pk):
    instance = get_object_or_404(WidgetInstance, pk=pk)
    if request.method == "POST":
        logger.info("Deleted widget %s pk=%s", instance.widget_type, instance.pk)
        instance.delete()
        messages.success(request, "Widget deleted.")
    return redirect("site_admin:widget_list")
