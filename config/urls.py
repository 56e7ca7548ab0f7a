from django.urls import path, include

urlpatterns = [
    path('search/', include('search.urls')),
    path('site-admin/', include('site_admin.urls')),
]
