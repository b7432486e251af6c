from vault_markdown.models import BlockKind, EntryType, RenderContext, VaultEntry, ViewMode


def test_block_kind_members():
    assert list(BlockKind) == [
        BlockKind.NONE,
        BlockKind.PARAGRAPH,
        BlockKind.ORDERED_LIST,
        BlockKind.UNORDERED_LIST,
        BlockKind.BLOCKQUOTE,
        BlockKind.CODE_FENCE,
    ]


def test_render_context_defaults():
    ctx = RenderContext()

    assert ctx.block is BlockKind.NONE
    assert ctx.paragraph == []
    assert ctx.fence_info == ""
    assert ctx.parts == []


def test_render_contexts_do_not_share_buffers():
    first = RenderContext()
    second = RenderContext()

    first.emit("<hr />")
    first.paragraph.append("text")

    assert second.parts == []
    assert second.paragraph == []


def test_vault_entry():
    folder = VaultEntry(name="Projects", path="Projects", type=EntryType.DIR)
    note = VaultEntry(name="Plan.md", path="Projects/Plan.md", type=EntryType.FILE)

    assert folder.is_dir
    assert not note.is_dir
    assert note.type == "file"


def test_view_mode_members():
    assert {mode.name for mode in ViewMode} == {"EDIT", "PREVIEW"}
