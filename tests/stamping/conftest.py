import pytest

from pdf_stamper.context import StampContext, registry


@pytest.fixture
def build_context(template_pdf):
    """Frozen context with one labelled template PDF per description."""
    def _build(*descriptions, partials=()):
        context = StampContext()
        for description in descriptions:
            context.add_template(description, template_pdf(description.name))
        for partial in partials:
            context.add_template_partial(partial)
        return context.freeze()
    return _build


@pytest.fixture
def opened(monkeypatch):
    """Every template handle opened while the test runs."""
    handles = []
    original = registry.open_source

    def _recording(source):
        handle = original(source)
        handles.append(handle)
        return handle

    monkeypatch.setattr(registry, "open_source", _recording)
    return handles
