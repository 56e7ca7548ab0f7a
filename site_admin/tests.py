from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.test import TestCase
from django.test.utils import override_settings
from django.urls import reverse

from search.tests.fakes import StubSearchClient
from site_admin.forms import WidgetInstanceForm
from widgets.models import WidgetInstance


class SiteAdminAccessTests(TestCase):
    def setUp(self):
        super().setUp()
        self.user = get_user_model().objects.create_user(
            username="reader",
            email="reader@example.com",
            password="password",
        )
        self.staff = get_user_model().objects.create_user(
            username="editor",
            email="editor@example.com",
            password="password",
            is_staff=True,
        )

    def test_widget_list_requires_login(self):
        response = self.client.get(reverse("site_admin:widget_list"))

        self.assertRedirects(
            response,
            f"{reverse('site_admin:login')}?next={reverse('site_admin:widget_list')}",
        )

    def test_widget_list_requires_staff(self):
        self.client.force_login(self.user)
        response = self.client.get(reverse("site_admin:widget_list"))

        self.assertEqual(response.status_code, 403)

        self.client.force_login(self.staff)
        response = self.client.get(reverse("site_admin:widget_list"))

        self.assertEqual(response.status_code, 200)

    def test_login_page_renders(self):
        response = self.client.get(reverse("site_admin:login"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'name="username"')


@override_settings(SEARCH_CLIENT="search.tests.fakes.StubSearchClient")
class SiteAdminWidgetTests(TestCase):
    def setUp(self):
        super().setUp()
        StubSearchClient.configure()
        self.staff = get_user_model().objects.create_user(
            username="editor",
            email="editor@example.com",
            password="password",
            is_staff=True,
        )
        self.client.force_login(self.staff)

    def test_create_form_renders_search_filters_settings(self):
        response = self.client.get(reverse("site_admin:widget_create"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'name="config_title"')
        self.assertContains(response, 'name="config_num_filters"')
        self.assertContains(response, "widgets/js/search-filters-admin.js")

    def test_create_saves_sanitized_config(self):
        response = self.client.post(
            reverse("site_admin:widget_create"),
            {
                "widget_type": "search_filters",
                "area": "sidebar",
                "order": 1,
                "is_active": "on",
                "config_title": "<em>Refine</em>",
                "config_use_filters": "on",
                "config_user_sort_enabled": "on",
                "config_sort": "bogus",
                "config_filter_type": ["taxonomy", "date_histogram"],
                "config_filter_name": ["Tags", "Archive"],
                "config_num_filters": ["500", "-1"],
                "config_taxonomy_type": ["tag", "tag"],
                "config_date_histogram_field": ["post_date", "post_date_gmt"],
                "config_date_histogram_interval": ["month", "year"],
            },
        )

        widget = WidgetInstance.objects.get()
        self.assertRedirects(response, reverse("site_admin:widget_edit", kwargs={"pk": widget.pk}))
        self.assertEqual(widget.area, "sidebar")
        self.assertTrue(widget.is_active)
        self.assertEqual(
            widget.config,
            {
                "title": "Refine",
                "use_filters": True,
                "search_box_enabled": False,
                "user_sort_enabled": True,
                "sort": "relevance_desc",
                "filters": [
                    {"name": "Tags", "type": "taxonomy", "taxonomy": "tag", "count": 50},
                    {
                        "name": "Archive",
                        "type": "date_histogram",
                        "count": 1,
                        "field": "post_date_gmt",
                        "interval": "year",
                    },
                ],
            },
        )
        messages = [m.message for m in get_messages(response.wsgi_request)]
        self.assertIn("Widget saved.", messages)

    def test_edit_shows_saved_settings(self):
        widget = WidgetInstance.objects.create(
            widget_type="search_filters",
            area="sidebar",
            config={
                "title": "Refine",
                "use_filters": True,
                "sort": "date_asc",
                "filters": [{"name": "Kinds", "type": "taxonomy", "taxonomy": "kind", "count": 9}],
            },
        )

        response = self.client.get(reverse("site_admin:widget_edit", kwargs={"pk": widget.pk}))

        self.assertContains(response, 'value="Refine"')
        self.assertContains(response, '<option value="date_asc" selected>')
        self.assertContains(response, 'value="Kinds"')
        self.assertContains(response, 'value="9"')

    def test_edit_rejects_unknown_area(self):
        widget = WidgetInstance.objects.create(widget_type="search_filters", area="sidebar", config={"title": "Keep"})

        response = self.client.post(
            reverse("site_admin:widget_edit", kwargs={"pk": widget.pk}),
            {"widget_type": "search_filters", "area": "footer", "order": 0, "config_title": "Changed"},
        )

        self.assertEqual(response.status_code, 200)
        widget.refresh_from_db()
        self.assertEqual(widget.config, {"title": "Keep"})

    def test_invalid_post_keeps_submitted_settings(self):
        widget = WidgetInstance.objects.create(widget_type="search_filters", area="sidebar", config={"title": "Keep"})

        response = self.client.post(
            reverse("site_admin:widget_edit", kwargs={"pk": widget.pk}),
            {
                "widget_type": "search_filters",
                "area": "footer",
                "order": 0,
                "config_title": "Changed",
                "config_use_filters": "on",
                "config_filter_type": ["post_type"],
                "config_filter_name": ["Types"],
                "config_num_filters": ["80"],
            },
        )

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'value="Changed"')
        self.assertNotContains(response, 'value="Keep"')
        self.assertContains(response, 'value="Types"')
        self.assertContains(response, 'value="50"')

    def test_delete_widget(self):
        widget = WidgetInstance.objects.create(widget_type="search_filters", area="sidebar")

        response = self.client.post(reverse("site_admin:widget_delete", kwargs={"pk": widget.pk}))

        self.assertRedirects(response, reverse("site_admin:widget_list"))
        self.assertFalse(WidgetInstance.objects.exists())

    def test_widget_list_shows_labels(self):
        WidgetInstance.objects.create(widget_type="search_filters", area="sidebar")

        response = self.client.get(reverse("site_admin:widget_list"))

        self.assertContains(response, ">Search</a>")
        self.assertContains(response, 'href="/site-admin/widgets/"')


class WidgetInstanceFormTests(TestCase):
    def test_defaults_to_first_widget_type(self):
        form = WidgetInstanceForm()

        self.assertEqual(form.bound_widget.slug, "search_filters")
        self.assertEqual(form.submitted_config(), {})

    def test_area_choices_follow_settings(self):
        with self.settings(WIDGET_AREAS=[{"slug": "footer", "label": "Footer"}]):
            form = WidgetInstanceForm()

        self.assertEqual(form.fields["area"].choices, [("footer", "Footer")])
