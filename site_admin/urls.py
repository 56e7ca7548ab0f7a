from django.contrib.auth import views as auth_views
from django.urls import path

from . import views

app_name = "site_admin"

urlpatterns = [
    path(
        "login/",
        auth_views.LoginView.as_view(template_name="site_admin/login.html"),
        name="login",
    ),
    path("widgets/", views.widget_list, name="widget_list"),
    path("widgets/new/", views.widget_create, name="widget_create"),
    path("widgets/<int:pk>/", views.widget_edit, name="widget_edit"),
    path("widgets/<int:pk>/delete/", views.widget_delete, name="widget_delete"),
]
