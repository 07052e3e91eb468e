"""docstore CLI — documentation pages and categories in one JSON slot.

Commands:
    docstore init [NAME]                 create docstore.toml + data dir
    docstore status                      counts, and whether the slot was corrupt
    docstore pages                       pages grouped by category
    docstore categories                  categories in display order
    docstore show SLUG                   dump one page
    docstore add-page TITLE              create a page
    docstore edit-page ID                change fields of a page
    docstore add-category NAME           create a category
    docstore edit-category ID            change fields of a category
    docstore delete-page ID              remove a page
    docstore delete-category ID          remove a category (pages keep their slug)
    docstore move-page ID INDEX          reorder a page within its category
    docstore move-category ID INDEX      reorder a category
    docstore search QUERY                fuzzy weighted search
    docstore export                      write a backup JSON file
    docstore import FILE                 preview, confirm, then append a backup
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from docstore.backend import JsonFileBackend
from docstore.config import DocStoreConfig, init_config, load_config
from docstore.errors import DocStoreError
from docstore.exporter import encode, write_export
from docstore.importer import apply_import, decode_import
from docstore.models import Category, Page, now_iso
from docstore.search import rank_pages
from docstore.store import ContentStore

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg() -> DocStoreConfig:
    try:
        return load_config()
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _open_store(cfg: DocStoreConfig | None = None) -> ContentStore:
    cfg = cfg or _load_cfg()
    return ContentStore(JsonFileBackend(cfg.data_file))


def _read_content(content: str | None, content_file: str | None) -> str | None:
    if content_file is not None:
        return Path(content_file).read_text(encoding="utf-8")
    return content


def _page_line(page: Page) -> str:
    tags = f"  [{', '.join(page.tags)}]" if page.tags else ""
    return f"  {page.order:>3}  {page.slug:<30} {page.title}{tags}  ({page.id})"


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="docstore")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose: bool) -> None:
    """docstore — documentation content store."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
    )


# ---------------------------------------------------------------------------
# docstore init / status
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name", required=False)
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
def init(name: str | None, root: str) -> None:
    """Create docstore.toml and the data directory in the current project."""
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path, name=name)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("docstore.toml already exists — skipping init")

    cfg = load_config(root_path)
    cfg.ensure_dirs()
    click.echo(f"Data file : {cfg.data_file}")


@cli.command()
def status() -> None:
    """Show counts and data file health."""
    cfg = _load_cfg()
    result = _open_store(cfg).load_result()
    click.echo(f"Data file  : {cfg.data_file}")
    click.echo(f"Pages      : {len(result.state.pages)}")
    click.echo(f"Categories : {len(result.state.categories)}")
    if result.was_corrupt:
        click.echo("Warning: data file could not be read; showing empty state", err=True)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@cli.command()
def pages() -> None:
    """List pages grouped by category, in display order."""
    store = _open_store()
    sections = store.group_pages()
    if not sections:
        click.echo("No pages or categories yet")
        return
    for category, members in sections:
        click.echo(f"{category.name} ({category.slug}) — {len(members)} pages")
        for page in members:
            click.echo(_page_line(page))


@cli.command()
def categories() -> None:
    """List categories in display order with page counts."""
    store = _open_store()
    state = store.get_all()
    for c in sorted(state.categories, key=lambda c: c.order):
        count = sum(1 for p in state.pages if p.category == c.slug)
        click.echo(f"  {c.order:>3}  {c.slug:<30} {c.name}  {count} pages  ({c.id})")


@cli.command()
@click.argument("slug")
def show(slug: str) -> None:
    """Print a page by slug."""
    store = _open_store()
    page = store.find_page_by_slug(slug)
    if page is None:
        raise click.ClickException(f"Page not found: {slug}")
    category = store.find_category_by_slug(page.category)
    click.echo(f"# {page.title}")
    click.echo(f"slug: {page.slug}  id: {page.id}")
    click.echo(f"category: {category.name if category else 'Uncategorized'}")
    if page.tags:
        click.echo(f"tags: {', '.join(page.tags)}")
    click.echo(f"updated: {page.updated_at}")
    if page.description:
        click.echo(f"\n{page.description}")
    click.echo(f"\n{page.content}")


# ---------------------------------------------------------------------------
# Create / edit
# ---------------------------------------------------------------------------


@cli.command("add-page")
@click.argument("title")
@click.option("--slug", default=None, help="Defaults to a slug of TITLE")
@click.option("--category", default="", help="Category slug")
@click.option("--description", default="")
@click.option("--tag", "tags", multiple=True, help="Repeatable")
@click.option("--content", default="")
@click.option("--content-file", default=None, type=click.Path(exists=True, dir_okay=False))
@click.option("--icon", default=None)
@click.option("--icon-color", default=None)
def add_page(
    title: str,
    slug: str | None,
    category: str,
    description: str,
    tags: tuple[str, ...],
    content: str,
    content_file: str | None,
    icon: str | None,
    icon_color: str | None,
) -> None:
    """Create a page at the end of its category."""
    store = _open_store()
    state = store.get_all()
    order = max((p.order + 1 for p in state.pages if p.category == category), default=0)
    page = Page.new(
        title,
        slug=slug,
        taken_ids=[p.id for p in state.pages],
        category=category,
        description=description,
        tags=list(tags),
        content=_read_content(content, content_file) or "",
        icon=icon,
        icon_color=icon_color,
        order=order,
    )
    try:
        store.upsert_page(page)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(page.id)


@cli.command("edit-page")
@click.argument("page_id")
@click.option("--title", default=None)
@click.option("--slug", default=None)
@click.option("--category", default=None)
@click.option("--description", default=None)
@click.option("--tag", "tags", multiple=True, help="Replaces all tags when given")
@click.option("--content", default=None)
@click.option("--content-file", default=None, type=click.Path(exists=True, dir_okay=False))
@click.option("--icon", default=None)
@click.option("--icon-color", default=None)
def edit_page(
    page_id: str,
    title: str | None,
    slug: str | None,
    category: str | None,
    description: str | None,
    tags: tuple[str, ...],
    content: str | None,
    content_file: str | None,
    icon: str | None,
    icon_color: str | None,
) -> None:
    """Update fields of an existing page. Unset options are left alone."""
    store = _open_store()
    page = store.get_page(page_id)
    if page is None:
        raise click.ClickException(f"Page not found: {page_id}")
    if title is not None:
        page.title = title
    if slug is not None:
        page.slug = slug
    if category is not None:
        page.category = category
    if description is not None:
        page.description = description
    if tags:
        page.tags = list(dict.fromkeys(tags))
    new_content = _read_content(content, content_file)
    if new_content is not None:
        page.content = new_content
    if icon is not None:
        page.icon = icon
    if icon_color is not None:
        page.icon_color = icon_color
    page.updated_at = now_iso()
    try:
        store.upsert_page(page)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Updated {page.id}")


@cli.command("add-category")
@click.argument("name")
@click.option("--slug", default=None, help="Defaults to a slug of NAME")
@click.option("--description", default="")
@click.option("--icon", default=None)
@click.option("--icon-color", default=None)
def add_category(
    name: str,
    slug: str | None,
    description: str,
    icon: str | None,
    icon_color: str | None,
) -> None:
    """Create a category after the last one."""
    store = _open_store()
    existing = store.get_all().categories
    category = Category.new(
        name,
        slug=slug,
        taken_ids=[c.id for c in existing],
        description=description,
        icon=icon,
        icon_color=icon_color,
        order=max((c.order + 1 for c in existing), default=0),
    )
    try:
        store.upsert_category(category)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(category.id)


@cli.command("edit-category")
@click.argument("category_id")
@click.option("--name", default=None)
@click.option("--slug", default=None, help="Pages still pointing at the old slug become uncategorized")
@click.option("--description", default=None)
@click.option("--icon", default=None)
@click.option("--icon-color", default=None)
def edit_category(
    category_id: str,
    name: str | None,
    slug: str | None,
    description: str | None,
    icon: str | None,
    icon_color: str | None,
) -> None:
    """Update fields of an existing category. Unset options are left alone."""
    store = _open_store()
    category = store.get_category(category_id)
    if category is None:
        raise click.ClickException(f"Category not found: {category_id}")
    if name is not None:
        category.name = name
    if slug is not None:
        category.slug = slug
    if not category.name or not category.slug:
        raise click.ClickException("Category name and slug must not be empty")
    if description is not None:
        category.description = description
    if icon is not None:
        category.icon = icon
    if icon_color is not None:
        category.icon_color = icon_color
    try:
        store.upsert_category(category)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Updated {category.id}")


# ---------------------------------------------------------------------------
# Delete / reorder (destructive: confirm first)
# ---------------------------------------------------------------------------


@cli.command("delete-page")
@click.argument("page_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_page(page_id: str, yes: bool) -> None:
    """Delete a page permanently."""
    store = _open_store()
    page = store.get_page(page_id)
    if page is None:
        raise click.ClickException(f"Page not found: {page_id}")
    if not yes:
        click.confirm(f'Delete page "{page.title}"? This cannot be undone.', abort=True)
    try:
        store.delete_page(page_id)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Deleted {page_id}")


@cli.command("delete-category")
@click.argument("category_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_category(category_id: str, yes: bool) -> None:
    """Delete a category. Its pages become uncategorized."""
    store = _open_store()
    category = store.get_category(category_id)
    if category is None:
        raise click.ClickException(f"Category not found: {category_id}")
    if not yes:
        count = store.page_count(category.slug)
        click.confirm(
            f'Delete category "{category.name}"? {count} pages will become uncategorized.',
            abort=True,
        )
    try:
        store.delete_category(category_id)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Deleted {category_id}")


@cli.command("move-page")
@click.argument("page_id")
@click.argument("index", type=int)
def move_page(page_id: str, index: int) -> None:
    """Move a page to INDEX (0-based) within its category."""
    store = _open_store()
    try:
        siblings = store.move_page(page_id, index)
    except KeyError as exc:
        raise click.ClickException(exc.args[0]) from exc
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    for page in siblings:
        click.echo(_page_line(page))


@cli.command("move-category")
@click.argument("category_id")
@click.argument("index", type=int)
def move_category(category_id: str, index: int) -> None:
    """Move a category to INDEX (0-based)."""
    store = _open_store()
    try:
        ordered = store.move_category(category_id, index)
    except KeyError as exc:
        raise click.ClickException(exc.args[0]) from exc
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    for c in ordered:
        click.echo(f"  {c.order:>3}  {c.slug:<30} {c.name}")


# ---------------------------------------------------------------------------
# docstore search
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("query")
@click.option("--limit", "-l", default=20, show_default=True)
def search(query: str, limit: int) -> None:
    """Fuzzy search over title, description, content and tags."""
    cfg = _load_cfg()
    all_pages = _open_store(cfg).get_all().pages
    if not query.strip():
        for page in all_pages[:limit]:
            click.echo(_page_line(page))
        return
    results = rank_pages(all_pages, query, cfg.search)
    if not results:
        click.echo("No results")
        return
    for page, score in results[:limit]:
        click.echo(f"  {score:.3f}  {page.slug:<30} {page.title}")


# ---------------------------------------------------------------------------
# docstore export / import
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--kind", default="all", type=click.Choice(["all", "pages", "categories"]), show_default=True
)
@click.option("--dir", "out_dir", default=None, help="Output directory (default: [export] dir)")
def export(kind: str, out_dir: str | None) -> None:
    """Write a dated JSON backup."""
    cfg = _load_cfg()
    state = _open_store(cfg).get_all()
    path = write_export(out_dir or cfg.export_dir, kind, encode(state, kind))
    click.echo(f"Wrote {path}")


@cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def import_cmd(path: str, yes: bool) -> None:
    """Append pages/categories from a backup file (never overwrites)."""
    try:
        candidate = decode_import(Path(path).read_bytes())
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Found {candidate.summary()} in {path}")
    if not yes:
        click.confirm("Import them as new entries?", abort=True)

    store = _open_store()
    try:
        result = apply_import(store, candidate)
    except DocStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Imported {len(result.pages)} pages, {len(result.categories)} categories")
