from colorstory.ai_generation import render_gradient_hero


def test_gradient_is_byte_identical_for_same_inputs():
    first = render_gradient_hero(["#112233", "#445566"])
    second = render_gradient_hero(["#112233", "#445566"])

    assert first.data == second.data
    assert first.content_type == "image/svg+xml"
    assert first.extension == "svg"


def test_gradient_uses_first_two_colors():
    svg = render_gradient_hero(["#112233", "#445566", "#778899"]).data.decode("utf-8")

    assert 'stop-color="#112233"' in svg
    assert 'stop-color="#445566"' in svg
    assert "#778899" not in svg
    assert 'width="1600"' in svg
    assert 'height="900"' in svg


def test_gradient_defaults_when_colors_missing_or_short():
    empty = render_gradient_hero([]).data.decode("utf-8")
    single = render_gradient_hero(["#112233"]).data.decode("utf-8")

    assert 'stop-color="#888888"' in empty
    assert 'stop-color="#444444"' in empty
    assert 'stop-color="#112233"' in single
    assert 'stop-color="#444444"' in single
    assert render_gradient_hero(None).data == render_gradient_hero([]).data


def test_gradient_ignores_malformed_colors():
    svg = render_gradient_hero(['"/><script>', "#445566"]).data.decode("utf-8")

    assert "script" not in svg
    assert 'stop-color="#888888"' in svg
