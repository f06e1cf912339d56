"""Unit tests for the visual tree renderer."""

from __future__ import annotations

import asyncio

import pytest
from lxml import etree

from chatterbox.parser import ParseFailure, ParseSuccess, parse_chatterbox
from chatterbox.render import (
    MODE_STRATEGIES,
    apply_markdown_fixes,
    render_chatterbox,
    render_errors,
    render_result,
    strategy_for,
    to_html,
    xml_text,
)
from chatterbox.models.config import ChatterboxConfig


def _render(source: str, **kwargs) -> etree._Element:
    result = parse_chatterbox(source)
    assert isinstance(result, ParseSuccess)
    root = etree.Element("div")
    asyncio.run(render_chatterbox(result, root, **kwargs))
    return root


def _classes(element: etree._Element) -> list[str]:
    return element.get("class", "").split()


def _containers(root: etree._Element) -> list[etree._Element]:
    return root.xpath("./div[@class='chatterbox-content']/div")


def _find_class(element: etree._Element, cls: str) -> etree._Element | None:
    found = element.xpath(f".//*[contains(concat(' ', @class, ' '), ' {cls} ')]")
    return found[0] if found else None


class TestRoot:
    """Root element classes and properties."""

    def test_default_mode_is_bubble(self) -> None:
        root = _render("bob> hi")

        assert _classes(root) == ["chatterbox", "mode-bubble", "fix-markdown-embed"]

    def test_mode_and_extra_classes(self) -> None:
        root = _render("---\nmode: simple\nclasses: [wide, 3, dark]\n---\nbob> hi", markdown_fixes=False)

        assert _classes(root) == ["chatterbox", "mode-simple", "wide", "dark"]

    def test_id_and_widths(self) -> None:
        root = _render("---\nchatterboxId: chat-7\nmaxMessageWidth: 60%\nmaxCapsuleWidth: 10em\n---")

        assert root.get("data-chatterbox-id") == "chat-7"
        assert root.get("style") == "--capsule-max-width: 10em; --message-max-width: 60%"

    def test_no_style_without_widths(self) -> None:
        assert _render("bob> hi").get("style") is None

    def test_strategy_selection(self) -> None:
        assert strategy_for(ChatterboxConfig()) is MODE_STRATEGIES["bubble"]
        assert strategy_for(ChatterboxConfig(mode="base")) is MODE_STRATEGIES["base"]


class TestEntries:
    """One container per entry."""

    def test_container_classes(self) -> None:
        root = _render("#() cap\n# note\n...\n@@@ rich\n@@@\nbob> hi")

        assert [_classes(c)[1] for c in _containers(root)] == [
            "capsule-container",
            "comment-container",
            "delimiter-container",
            "markdown-container",
            "message-container",
        ]

    def test_plain_content_entities_decoded(self) -> None:
        root = _render("# a &amp; b\n#() &lt;3")

        assert _find_class(root, "comment").text == "a & b"
        assert _find_class(root, "capsule").text == "<3"

    def test_delimiter_has_three_dots(self) -> None:
        root = _render("...")

        assert len(root.xpath(".//div[@class='dot']")) == 3

    def test_rich_block_uses_capability(self) -> None:
        calls: list[tuple[str, str]] = []

        async def fake_renderer(content: str, target: etree._Element, source_path: str) -> None:
            calls.append((content, source_path))
            etree.SubElement(target, "strong").text = content.strip("*")

        root = _render("@@@\n**bold**\n@@@", rich_text_renderer=fake_renderer, source_path="note.md")

        assert calls == [("**bold**", "note.md")]
        assert _find_class(root, "markdown").find("strong").text == "bold"

    def test_renderer_errors_propagate(self) -> None:
        async def broken(content: str, target: etree._Element, source_path: str) -> None:
            raise RuntimeError("renderer exploded")

        with pytest.raises(RuntimeError, match="renderer exploded"):
            _render("bob@> *hi*", rich_text_renderer=broken)


class TestMessages:
    """Message layout and author data."""

    def test_message_attributes(self) -> None:
        root = _render("ann< first\nbob> hi\n^ narration")
        ann, bob, anon = _containers(root)

        assert bob.get("data-cbx-author") == "bob"
        assert bob.get("data-cbx-author-full") == "bob"
        assert bob.get("data-cbx-author-order") == "2"
        assert "message-right" in _classes(bob)
        assert "message-left" in _classes(ann)
        assert anon.get("data-cbx-author-order") == "0"
        assert "message-center" in _classes(anon)

    def test_author_header_and_auto_color(self) -> None:
        root = _render("bob> hi")

        assert _find_class(root, "message-author").text == "bob"
        assert _find_class(root, "message").get("style") == "--message-author-color: var(--auto-color-1)"
        assert _find_class(root, "message-content").text == "hi"

    def test_hidden_author(self) -> None:
        root = _render("bob!> hi")

        assert _find_class(root, "message-author") is None
        assert _find_class(root, "message").get("style") is None

    def test_anonymous_has_no_header(self) -> None:
        assert _find_class(_render("> hi"), "message-author") is None

    def test_auto_color_disabled(self) -> None:
        root = _render("---\nautoColorAuthors: false\n---\nbob> hi")

        assert _find_class(root, "message").get("style") is None

    def test_author_overrides(self) -> None:
        source = (
            "---\n"
            "authors:\n"
            "  bob:\n"
            "    fullName: Bob Smith\n"
            "    backgroundColor: red\n"
            "    authorColor: '#00f'\n"
            "    textColor: white\n"
            "    subtextColor: black\n"
            "---\n"
            "bob|seen > hi"
        )

        root = _render(source)
        style = _find_class(root, "message").get("style")

        assert _containers(root)[0].get("data-cbx-author-full") == "Bob Smith"
        assert _find_class(root, "message-author").text == "Bob Smith"
        assert "--message-bg-color: #ff0000ff" in style
        assert "--message-author-color: #0000ffff" in style
        assert "--message-content-color: #ffffffff" in style
        assert "--message-subtext-color: #000000ff" in style

    def test_subtext_footer(self) -> None:
        root = _render("bob | 9:30 > hi")

        assert _find_class(root, "message-footer") is not None
        assert _find_class(root, "message-subtext").text == "9:30"

    def test_simple_mode_inline_author(self) -> None:
        root = _render("---\nmode: simple\n---\nbob> hi")

        author_el = _find_class(root, "message-author")
        assert author_el.tag == "span"
        assert author_el.getparent().get("class") == "message-body"
        assert _find_class(root, "message-header") is None

    def test_rich_message_with_markdown_fixes(self) -> None:
        async def paragraphs(content: str, target: etree._Element, source_path: str) -> None:
            for line in content.split("\n"):
                etree.SubElement(target, "p").text = line

        root = _render("bob >>>@\none\ntwo\nthree\n>>>", rich_text_renderer=paragraphs)
        paras = _find_class(root, "message-content").findall("p")

        assert [p.get("class") for p in paras] == ["cbx-md-fix-first", None, "cbx-md-fix-last"]

    def test_rich_message_without_fixes(self) -> None:
        async def paragraph(content: str, target: etree._Element, source_path: str) -> None:
            etree.SubElement(target, "p").text = content

        root = _render("bob@> hi", rich_text_renderer=paragraph, markdown_fixes=False)

        assert _find_class(root, "message-content").find("p").get("class") is None


class TestMarkdownFixes:
    """apply_markdown_fixes."""

    def test_single_child_gets_both(self) -> None:
        el = etree.Element("div")
        etree.SubElement(el, "p")

        apply_markdown_fixes(el)

        assert el[0].get("class") == "cbx-md-fix-first cbx-md-fix-last"

    def test_comments_skipped(self) -> None:
        el = etree.Element("div")
        el.append(etree.Comment("note"))
        etree.SubElement(el, "p")
        etree.SubElement(el, "ul")

        apply_markdown_fixes(el)

        assert el[1].get("class") == "cbx-md-fix-first"
        assert el[2].get("class") == "cbx-md-fix-last"

    def test_empty_element(self) -> None:
        el = etree.Element("div")

        apply_markdown_fixes(el)

        assert el.get("class") is None


class TestXmlIncompatibleCharacters:
    """Control characters in source text never reach lxml."""

    def test_message_content(self) -> None:
        root = _render("bob> hello\x0cworld")

        assert _find_class(root, "message-content").text == "helloworld"

    def test_comment_and_capsule(self) -> None:
        root = _render("# side\x00note\n#() cap\x0bsule")

        assert _find_class(root, "comment").text == "sidenote"
        assert _find_class(root, "capsule").text == "capsule"

    def test_decoded_character_reference(self) -> None:
        root = _render("# form&#12;feed")

        assert "\x0c" not in _find_class(root, "comment").text

    def test_author_and_subtext(self) -> None:
        root = _render("bo\x07b | se\x1ben > hi")
        (container,) = _containers(root)

        assert container.get("data-cbx-author") == "bob"
        assert container.get("data-cbx-author-full") == "bob"
        assert _find_class(root, "message-author").text == "bob"
        assert _find_class(root, "message-subtext").text == "seen"

    def test_id_and_classes(self) -> None:
        root = _render('---\nchatterboxId: "chat\\x0c7"\nclasses: ["wi\\x01de"]\n---\nbob> hi')

        assert root.get("data-chatterbox-id") == "chat7"
        assert "wide" in _classes(root)

    def test_plain_text_rich_block(self) -> None:
        root = _render("@@@\nbold\x02text\n@@@")

        assert _find_class(root, "markdown").text == "boldtext"

    def test_error_items(self) -> None:
        into = etree.Element("div")

        render_errors(["bad\x0cvalue"], into)

        assert into.xpath(".//li")[0].text == "badvalue"

    def test_serialises(self) -> None:
        result = parse_chatterbox("bob> hello\x0cworld")

        assert "helloworld" in to_html(asyncio.run(render_result(result)))

    def test_xml_text_keeps_valid_characters(self) -> None:
        value = "tab\tline\nreturn\r café \U0001f600"

        assert xml_text(value) == value

    def test_xml_text_drops_invalid_characters(self) -> None:
        assert xml_text("a\x00b\x1fc\ufffed") == "abcd"


class TestErrors:
    """Error rendering."""

    def test_render_errors(self) -> None:
        into = etree.Element("div")

        render_errors(["first problem", "second problem"], into)

        assert _find_class(into, "error-title").text == "Chatterbox error"
        assert [li.text for li in into.xpath(".//ul[@class='error-items']/li")] == [
            "first problem",
            "second problem",
        ]

    def test_render_result_failure(self) -> None:
        tree = asyncio.run(render_result(ParseFailure(error_list=["Frontmatter is not valid YAML."])))

        assert "Frontmatter is not valid YAML." in to_html(tree)

    def test_render_result_success(self) -> None:
        result = parse_chatterbox("bob> hi")

        html_text = to_html(asyncio.run(render_result(result)))

        assert 'class="chatterbox mode-bubble fix-markdown-embed"' in html_text
        assert "hi" in html_text

    def test_render_result_passes_options(self) -> None:
        calls: list[str] = []

        async def recording(content: str, target: etree._Element, source_path: str) -> None:
            calls.append(source_path)
            target.text = content

        result = parse_chatterbox("bob@> hi")

        tree = asyncio.run(
            render_result(
                result,
                rich_text_renderer=recording,
                source_path="notes/chat.md",
                markdown_fixes=False,
            )
        )

        assert calls == ["notes/chat.md"]
        assert "fix-markdown-embed" not in tree.get("class")

    def test_render_result_options_are_keyword_only(self) -> None:
        result = parse_chatterbox("bob> hi")

        with pytest.raises(TypeError):
            asyncio.run(render_result(result, None))
