"""Tests for template resolution and rendering."""

from django.test import TestCase

from delivery.enums import Channel
from delivery.exceptions import TemplateNotFoundError
from delivery.services.template_resolver import (
    TemplateResolver,
    html_to_text,
    substitute,
)
from tests.factories import create_template


class TestSubstitute(TestCase):
    """Test suite for placeholder substitution."""

    def test_replaces_known_placeholders(self):
        """Test placeholders are filled with and without inner spaces."""
        text = substitute(
            "Hi {{name}}, site {{ site }} is {{  status  }}",
            {"name": "Asha", "site": "Hampi", "status": "live"},
        )

        self.assertEqual(text, "Hi Asha, site Hampi is live")

    def test_unknown_placeholders_become_empty(self):
        """Test no raw placeholder survives rendering."""
        text = substitute("Dear {{userName}}{{missing}}!", {"userName": "Ravi"})

        self.assertEqual(text, "Dear Ravi!")
        self.assertNotIn("{{", text)

    def test_none_template_renders_empty(self):
        """Test a missing template field renders as an empty string."""
        self.assertEqual(substitute(None, {"a": "b"}), "")


class TestHtmlToText(TestCase):
    """Test suite for HTML stripping."""

    def test_strips_tags_and_decodes_entities(self):
        """Test tags are removed and common entities decoded."""
        html = "<p>Fish&nbsp;&amp;&nbsp;Chips &lt;3 &quot;ok&quot; it&#39;s</p>"

        self.assertEqual(html_to_text(html), "Fish & Chips <3 \"ok\" it's")

    def test_ampersand_decoded_last(self):
        """Test an escaped entity is decoded only once."""
        self.assertEqual(html_to_text("&amp;lt;"), "&lt;")

    def test_collapses_blank_lines_and_trims(self):
        """Test runs of blank lines collapse to one."""
        html = "\n\n<h1>Title</h1>\n\n\n\n<p>Body</p>\n  "

        self.assertEqual(html_to_text(html), "Title\n\nBody")


class TestTemplateResolver(TestCase):
    """Test suite for TemplateResolver."""

    def setUp(self):
        """Set up test fixtures."""
        self.resolver = TemplateResolver()

    def test_resolve_active_template(self):
        """Test an active template is returned."""
        template = create_template()

        resolved = self.resolver.resolve("verification_approved")

        self.assertEqual(resolved.pk, template.pk)

    def test_resolve_missing_template(self):
        """Test an unknown key raises with reason missing."""
        with self.assertRaises(TemplateNotFoundError) as ctx:
            self.resolver.resolve("no_such_key")

        self.assertEqual(ctx.exception.reason, "missing")
        self.assertIn("no_such_key", str(ctx.exception))

    def test_resolve_inactive_template(self):
        """Test an inactive template is treated as not found."""
        create_template(is_active=False)

        with self.assertRaises(TemplateNotFoundError) as ctx:
            self.resolver.resolve("verification_approved")

        self.assertEqual(ctx.exception.reason, "inactive")

    def test_render_email_uses_stripped_html_when_no_text(self):
        """Test the email text falls back to the stripped HTML body."""
        template = create_template()

        content = self.resolver.render(template, Channel.EMAIL, {"userName": "Asha"})

        self.assertEqual(content.subject, "Welcome Asha")
        self.assertEqual(content.html, "<p>Hello Asha, your site is live.</p>")
        self.assertEqual(content.text, "Hello Asha, your site is live.")

    def test_render_email_prefers_text_body(self):
        """Test an authored text body is used as is."""
        template = create_template(email_body_text="Plain {{userName}}")

        content = self.resolver.render(template, "email", {"userName": "Asha"})

        self.assertEqual(content.text, "Plain Asha")

    def test_render_push_falls_back_to_email_fields(self):
        """Test push title and body come from the email content when unset."""
        template = create_template()

        content = self.resolver.render(template, Channel.PUSH, {"userName": "Asha"})

        self.assertEqual(content.subject, "Welcome Asha")
        self.assertEqual(content.text, "Hello Asha, your site is live.")

    def test_render_push_prefers_push_fields(self):
        """Test push-specific fields and URLs are rendered."""
        template = create_template(
            push_title="Approved, {{userName}}",
            push_body="Tap to view {{siteName}}",
            push_image_url="https://cdn.heritage.test/{{siteId}}.jpg",
            push_action_url="heritage://sites/{{siteId}}",
        )

        content = self.resolver.render(
            template,
            Channel.PUSH,
            {"userName": "Asha", "siteName": "Hampi", "siteId": "42"},
        )

        self.assertEqual(content.subject, "Approved, Asha")
        self.assertEqual(content.text, "Tap to view Hampi")
        self.assertEqual(content.image_url, "https://cdn.heritage.test/42.jpg")
        self.assertEqual(content.action_url, "heritage://sites/42")

    def test_render_push_title_falls_back_to_template_name(self):
        """Test an empty rendered subject falls back to the template name."""
        template = create_template(email_subject="{{missing}}")

        content = self.resolver.render(template, Channel.PUSH, {})

        self.assertEqual(content.subject, "Verification Approved")

    def test_list_active_templates(self):
        """Test only active templates are listed, ordered by key."""
        create_template("site_rejected")
        create_template("account_locked")
        create_template("old_template", is_active=False)

        keys = [t.template_key for t in self.resolver.list_active_templates()]

        self.assertEqual(keys, ["account_locked", "site_rejected"])
