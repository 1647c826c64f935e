"""
Tests for slide rendering, preview navigation and the startup loader.
"""

import httpx
import pytest

from award_slides.client import AwardsApiClient
from award_slides.defaults import default_awardees
from award_slides.models import Awardee, SlideTheme, Visibility
from award_slides.presentation import (
    FALLBACK_GRADIENT,
    Presenter,
    accent_style,
    badge_style,
    load_awardees,
    render_slide,
)


@pytest.fixture
def deck():
    return [Awardee(id=i, name=f"Person {i}", is_hidden=(i == 2)) for i in (1, 2, 3)]


class TestRenderSlide:
    """Projection of an awardee into render values."""

    def test_defaults_for_unset_options(self):
        slide = render_slide(Awardee(id=1, name="Ada", category="Leadership"))
        assert slide.photo_scale == 1.0
        assert slide.description_text_size == 13
        assert slide.icon == "star"
        assert slide.logo_size == "medium"
        assert all(slide.visible.values())
        assert slide.layout["photo"].width == 400

    def test_hidden_elements_are_not_rendered(self):
        awardee = Awardee(id=1, name="Ada", photo="x.png", visibility=Visibility(show_name=False, show_photo=False))
        slide = render_slide(awardee)
        assert "name" not in slide.texts
        assert slide.photo is None
        assert slide.visible["title"] is True

    def test_counter(self):
        assert render_slide(Awardee(id=1), 2, 5).counter == "2 / 5"

    def test_category_gradient(self):
        style = accent_style(Awardee(id=1, category="Leadership"))
        assert style.kind == "gradient"
        assert style.css() == "linear-gradient(to right, rgb(245 158 11), rgb(250 204 21))"

    def test_unknown_category_uses_fallback(self):
        assert accent_style(Awardee(id=1, category="Whatever")).colors == FALLBACK_GRADIENT

    def test_flat_custom_accent(self):
        theme = SlideTheme(accent_color="#ff0000", accent_color_type="flat")
        assert accent_style(Awardee(id=1, slide_theme=theme)).css() == "#ff0000"

    def test_gradient_custom_accent_defaults_end_color(self):
        theme = SlideTheme(accent_color="#ff0000")
        assert accent_style(Awardee(id=1, slide_theme=theme)).colors == ("#ff0000", "#22d3ee")

    def test_badge_color_override(self):
        assert badge_style(Awardee(id=1, logo_badge_color="#00ff00")).css() == "#00ff00"


class TestPresenter:
    """Navigation in edit view and preview mode."""

    def test_edit_view_shows_hidden_slides(self, deck):
        presenter = Presenter(deck)
        assert [a.id for a in presenter.visible_awardees()] == [1, 2, 3]

    def test_preview_skips_hidden_and_wraps(self, deck):
        presenter = Presenter(deck)
        presenter.enter_preview()
        assert presenter.current_awardee().id == 1
        presenter.handle_key("ArrowRight")
        assert presenter.current_awardee().id == 3
        presenter.handle_key("ArrowRight")
        assert presenter.current_awardee().id == 1
        presenter.handle_key("ArrowLeft")
        assert presenter.current_awardee().id == 3

    def test_render_counter_in_preview(self, deck):
        presenter = Presenter(deck)
        presenter.enter_preview()
        presenter.next()
        assert presenter.render_current().counter == "2 / 2"

    def test_escape_leaves_preview(self, deck):
        presenter = Presenter(deck)
        presenter.enter_preview()
        presenter.handle_key("Escape")
        assert presenter.preview_mode is False

    def test_keys_ignored_while_editor_open(self, deck):
        presenter = Presenter(deck)
        presenter.open_editor()
        presenter.handle_key("ArrowRight")
        assert presenter.current == 0
        presenter.close_editor()
        presenter.handle_key("ArrowRight")
        assert presenter.current == 1

    def test_edge_flags(self, deck):
        presenter = Presenter(deck)
        assert presenter.can_go_previous is False
        presenter.go_to(2)
        assert presenter.can_go_next is False
        with pytest.raises(IndexError):
            presenter.go_to(3)

    def test_update_clamps_current(self, deck):
        presenter = Presenter(deck)
        presenter.go_to(2)
        presenter.update(deck[:1])
        assert presenter.current == 0

    def test_empty_deck(self):
        presenter = Presenter([])
        presenter.next()
        assert presenter.render_current() is None


class TestLoadAwardees:
    """Startup loading with seeding and fallback."""

    def test_empty_backend_is_seeded(self, api_client):
        loaded = load_awardees(api_client)
        assert [a.id for a in loaded] == [1, 2, 3, 4]
        assert [a.id for a in api_client.list_awardees()] == [1, 2, 3, 4]

    def test_existing_records_are_returned(self, api_client, sample_awardees):
        api_client.save_batch(sample_awardees[:2])
        assert [a.name for a in load_awardees(api_client)] == ["Ada", "Grace"]

    def test_unreachable_backend_falls_back(self, anonymous_client):
        loaded = load_awardees(AwardsApiClient(token="wrong", http=anonymous_client))
        assert [a.id for a in loaded] == [a.id for a in default_awardees()]

    def test_duplicate_ids_keep_first(self):
        class DuplicatingClient:
            def list_awardees(self):
                return [Awardee(id=1, name="first"), Awardee(id=1, name="second"), Awardee(id=2)]

        loaded = load_awardees(DuplicatingClient())
        assert [(a.id, a.name) for a in loaded] == [(1, "first"), (2, "")]

    def test_malformed_server_data_falls_back(self):
        def reply(request):
            return httpx.Response(200, json={"awardees": [{"id": 1, "layout": {"photo": {"x": None}}}]})

        http = httpx.Client(base_url="http://awards.test", transport=httpx.MockTransport(reply))
        loaded = load_awardees(AwardsApiClient(token="t", http=http))
        assert [a.id for a in loaded] == [a.id for a in default_awardees()]
