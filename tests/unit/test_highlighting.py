from gsa_response.engine.highlighting import snippets_from_highlighting


def test_fragments_are_flattened_in_field_order() -> None:
    highlighting = {
        "doc-1": {"description": ["d1", "d2"], "text_t": ["t1"]},
        "doc-2": {"text_t": []},
    }

    snippets = snippets_from_highlighting(highlighting)

    assert snippets == {"doc-1": ["d1", "d2", "t1"], "doc-2": []}


def test_missing_highlighting_is_empty_index() -> None:
    assert snippets_from_highlighting(None) == {}
    assert snippets_from_highlighting({}) == {}
