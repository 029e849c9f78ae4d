"""Command-line interface for Hinged."""

from __future__ import annotations

import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hinged import __version__
from hinged.config import Settings, load_config
from hinged.enums import (
    CatalogSystem,
    CenteringGrade,
    CollectionStatus,
    GumCondition,
    SmartCollectionType,
)
from hinged.errors import HingedError, HingedValueError, get_friendly_message, log_error

if TYPE_CHECKING:
    from hinged.models import Album, Collection, Country
    from hinged.store import Library

# Load environment variables from .env file
load_dotenv()

console = Console()

_GUM_CHOICES = click.Choice([g.value for g in GumCondition])
_GRADE_CHOICES = click.Choice([g.value for g in CenteringGrade])
_STATUS_CHOICES = click.Choice([s.value for s in CollectionStatus])
_CATALOG_CHOICES = click.Choice([c.value for c in CatalogSystem])
_SMART_CHOICES = click.Choice([s.value for s in SmartCollectionType])
_CATALOG_VALUES = {c.value for c in CatalogSystem}
_FORMAT_OPTION = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json", "csv"]),
    default="text",
    help="Output format",
)


@click.group()
@click.version_option(version=__version__, prog_name="hinged")
@click.option(
    "--library",
    "library_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Library file (default: from config, or hinged.library.json)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: search standard locations)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (only results)")
@click.pass_context
def main(
    ctx: click.Context,
    library_path: Path | None,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Hinged - Keep track of your stamp collection and find the gaps in it."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    ctx.obj["library_path"] = library_path


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _fail(error: Exception, context: str) -> NoReturn:
    """Log an error, report it to the user and exit."""
    log_error(error, context)
    console.print(f"[red]Error:[/red] {escape(get_friendly_message(error))}")
    sys.exit(1)


def _info(ctx: click.Context, message: str) -> None:
    """Print a status message unless running quietly."""
    if not ctx.obj.get("quiet", False):
        console.print(message)


def _get_settings(ctx: click.Context) -> Settings:
    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = load_config(ctx.obj.get("config_path"))
        except (HingedError, OSError) as e:
            _fail(e, "loading config")
    return ctx.obj["settings"]


def _get_library(ctx: click.Context) -> Library:
    """Open the library, seeding the country list for a brand new file."""
    from hinged.store import Library

    if "library" not in ctx.obj:
        path = ctx.obj.get("library_path") or _get_settings(ctx).library_path()
        try:
            library = Library.open(path)
        except HingedError as e:
            _fail(e, "opening library")
        if not path.exists():
            library.ensure_default_countries()
        ctx.obj["library"] = library
    return ctx.obj["library"]


def _save(library: Library) -> None:
    try:
        library.save()
    except OSError as e:
        _fail(e, "saving library")


def _match_by_name(records: list[Any], ref: str, kind: str) -> Any:
    wanted = ref.strip().lower()
    matches = [r for r in records if r.name.lower() == wanted]
    if not matches:
        raise HingedValueError(f"No {kind} named {ref!r}")
    if len(matches) > 1:
        raise HingedValueError(f"More than one {kind} is named {ref!r}; use its ID instead")
    return matches[0]


def _resolve_country(library: Library, ref: str) -> Country:
    """Find a country by ID or name."""
    if ref in library.countries:
        return library.countries[ref]
    country = library.find_country(ref)
    if country is None:
        raise HingedValueError(f"No country named {ref!r}")
    return country


def _resolve_collection(library: Library, ref: str) -> Collection:
    """Find a collection by ID or name."""
    if ref in library.collections:
        return library.collections[ref]
    return _match_by_name(list(library.collections.values()), ref, "collection")


def _resolve_album(library: Library, ref: str) -> Album:
    """Find an album by ID or name."""
    if ref in library.albums:
        return library.albums[ref]
    return _match_by_name(list(library.albums.values()), ref, "album")


def _parse_decimal(value: str | None, name: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise HingedValueError(f"Invalid {name}: {value!r}") from None


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HingedValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


# ----------------------------------------------------------------------
# Countries
# ----------------------------------------------------------------------


@main.group()
def country() -> None:
    """Manage countries and their catalog prefixes."""
    pass


@country.command(name="list")
@click.option("--with-prefixes", is_flag=True, help="Only countries with catalog prefixes")
@click.pass_context
def country_list(ctx: click.Context, with_prefixes: bool) -> None:
    """List countries."""
    library = _get_library(ctx)
    countries = library.list_countries()
    if with_prefixes:
        countries = [c for c in countries if c.catalog_prefixes]

    table = Table(title=f"Countries ({len(countries)})")
    table.add_column("Name", style="bold")
    table.add_column("Prefixes")
    if ctx.obj.get("verbose"):
        table.add_column("ID", style="dim")

    for c in countries:
        prefixes = ", ".join(
            f"{CatalogSystem(system).prefix or system}: {code}"
            for system, code in sorted(c.catalog_prefixes.items())
            if system in _CATALOG_VALUES
        )
        row = [escape(c.name), escape(prefixes)]
        if ctx.obj.get("verbose"):
            row.append(c.id)
        table.add_row(*row)

    console.print(table)


@country.command(name="add")
@click.argument("name")
@click.option(
    "--prefix",
    "prefixes",
    multiple=True,
    metavar="SYSTEM=CODE",
    help="Catalog prefix, e.g. scott=CAN (repeatable)",
)
@click.pass_context
def country_add(ctx: click.Context, name: str, prefixes: tuple[str, ...]) -> None:
    """Add a country."""
    from hinged.models import Country

    library = _get_library(ctx)
    try:
        if library.find_country(name) is not None:
            raise HingedValueError(f"Country {name!r} already exists")

        country = Country(name=name.strip())
        for item in prefixes:
            system, sep, code = item.partition("=")
            if not sep or not code:
                raise HingedValueError(f"Invalid prefix {item!r}, expected SYSTEM=CODE")
            try:
                country.set_prefix(CatalogSystem(system.strip()), code.strip())
            except ValueError:
                raise HingedValueError(f"Unknown catalog system {system!r}") from None

        library.add_country(country)
    except HingedError as e:
        _fail(e, "country add")

    _save(library)
    _info(ctx, f"[green]Added country:[/green] {escape(country.name)}")


@country.command(name="remove")
@click.argument("ref")
@click.pass_context
def country_remove(ctx: click.Context, ref: str) -> None:
    """Remove a country (collections and stamps keep existing without it)."""
    library = _get_library(ctx)
    try:
        country = _resolve_country(library, ref)
        library.remove_country(country.id)
    except HingedError as e:
        _fail(e, "country remove")

    _save(library)
    _info(ctx, f"[green]Removed country:[/green] {escape(country.name)}")


@country.command(name="set-prefix")
@click.argument("ref")
@click.argument("system", type=_CATALOG_CHOICES)
@click.argument("code", required=False)
@click.pass_context
def country_set_prefix(ctx: click.Context, ref: str, system: str, code: str | None) -> None:
    """Set a country's catalog prefix, or clear it when CODE is omitted."""
    library = _get_library(ctx)
    try:
        target = _resolve_country(library, ref)
    except HingedError as e:
        _fail(e, "country set-prefix")

    target.set_prefix(CatalogSystem(system), code.strip() if code else None)
    _save(library)
    if code:
        _info(ctx, f"[green]{escape(target.name)}:[/green] {system} prefix is now {escape(code)}")
    else:
        _info(ctx, f"[green]{escape(target.name)}:[/green] {system} prefix cleared")


@country.command(name="rename")
@click.argument("ref")
@click.argument("new_name")
@click.pass_context
def country_rename(ctx: click.Context, ref: str, new_name: str) -> None:
    """Rename a country."""
    library = _get_library(ctx)
    try:
        target = _resolve_country(library, ref)
        existing = library.find_country(new_name)
        if existing is not None and existing.id != target.id:
            raise HingedValueError(f"Country {new_name!r} already exists")
        old_name = target.name
        library.update_country(target.id, name=new_name.strip())
    except HingedError as e:
        _fail(e, "country rename")

    _save(library)
    _info(ctx, f"[green]Renamed country:[/green] {escape(old_name)} -> {escape(new_name.strip())}")


@country.command(name="seed")
@click.pass_context
def country_seed(ctx: click.Context) -> None:
    """Add any missing built-in countries."""
    library = _get_library(ctx)
    count = library.ensure_default_countries()
    _save(library)
    if count == 0:
        _info(ctx, "[dim]All built-in countries are already present.[/dim]")
    else:
        _info(ctx, f"[green]Added {count} countries.[/green]")


# ----------------------------------------------------------------------
# Collections
# ----------------------------------------------------------------------


@main.group()
def collection() -> None:
    """Manage collections."""
    pass


@collection.command(name="list")
@click.pass_context
def collection_list(ctx: click.Context) -> None:
    """List collections with stamp counts."""
    library = _get_library(ctx)
    collections = library.list_collections()

    if not collections:
        console.print("[dim]No collections yet.[/dim]")
        return

    table = Table(title=f"Collections ({len(collections)})")
    table.add_column("Name", style="bold")
    table.add_column("Country")
    table.add_column("Catalog")
    table.add_column("Albums", justify="right")
    table.add_column("Stamps", justify="right")
    table.add_column("Owned", justify="right", style="green")
    table.add_column("Wanted", justify="right", style="yellow")
    if ctx.obj.get("verbose"):
        table.add_column("ID", style="dim")

    for c in collections:
        counts = library.counts_for_collection(c.id)
        country = library.countries.get(c.country_id or "")
        row = [
            escape(c.name),
            escape(country.name) if country else "Worldwide",
            c.catalog_system.display_name,
            str(len(library.albums_in(c.id))),
            str(counts.total),
            str(counts.owned),
            str(counts.wanted),
        ]
        if ctx.obj.get("verbose"):
            row.append(c.id)
        table.add_row(*row)

    console.print(table)


@collection.command(name="add")
@click.argument("name")
@click.option("--description", "-d", default="", help="Collection description")
@click.option("--country", "country_ref", default=None, help="Country name or ID (omit for worldwide)")
@click.option(
    "--catalog",
    type=_CATALOG_CHOICES,
    default=None,
    help="Catalog system (default: from config)",
)
@click.pass_context
def collection_add(
    ctx: click.Context,
    name: str,
    description: str,
    country_ref: str | None,
    catalog: str | None,
) -> None:
    """Add a collection."""
    from hinged.models import Collection

    library = _get_library(ctx)
    settings = _get_settings(ctx)
    try:
        country_id = _resolve_country(library, country_ref).id if country_ref else None
        system = CatalogSystem(catalog) if catalog else settings.defaults.effective_catalog_system
        sort_order = max((c.sort_order for c in library.collections.values()), default=-1) + 1
        created = library.add_collection(
            Collection(
                name=name,
                description=description,
                catalog_system=system,
                country_id=country_id,
                sort_order=sort_order,
            )
        )
    except HingedError as e:
        _fail(e, "collection add")

    _save(library)
    _info(ctx, f"[green]Added collection:[/green] {escape(created.name)} [dim]({created.id})[/dim]")


@collection.command(name="remove")
@click.argument("ref")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def collection_remove(ctx: click.Context, ref: str, yes: bool) -> None:
    """Remove a collection with all of its albums and stamps."""
    library = _get_library(ctx)
    try:
        target = _resolve_collection(library, ref)
    except HingedError as e:
        _fail(e, "collection remove")

    counts = library.counts_for_collection(target.id)
    if not yes:
        click.confirm(
            f"Remove '{target.name}' and its {counts.total} stamp(s)?",
            abort=True,
        )

    library.remove_collection(target.id)
    _save(library)
    _info(ctx, f"[green]Removed collection:[/green] {escape(target.name)}")


# ----------------------------------------------------------------------
# Albums
# ----------------------------------------------------------------------


@main.group()
def album() -> None:
    """Manage albums."""
    pass


@album.command(name="list")
@click.option("--collection", "collection_ref", default=None, help="Collection name or ID")
@click.pass_context
def album_list(ctx: click.Context, collection_ref: str | None) -> None:
    """List albums with stamp counts."""
    library = _get_library(ctx)
    try:
        if collection_ref:
            collections = [_resolve_collection(library, collection_ref)]
        else:
            collections = library.list_collections()
    except HingedError as e:
        _fail(e, "album list")

    table = Table(title="Albums")
    table.add_column("Collection")
    table.add_column("Album", style="bold")
    table.add_column("Stamps", justify="right")
    table.add_column("Owned", justify="right", style="green")
    table.add_column("Wanted", justify="right", style="yellow")
    if ctx.obj.get("verbose"):
        table.add_column("ID", style="dim")

    rows = 0
    for c in collections:
        for a in library.albums_in(c.id):
            counts = library.counts_for_album(a.id)
            row = [
                escape(c.name),
                escape(a.name),
                str(counts.total),
                str(counts.owned),
                str(counts.wanted),
            ]
            if ctx.obj.get("verbose"):
                row.append(a.id)
            table.add_row(*row)
            rows += 1

    if rows == 0:
        console.print("[dim]No albums yet.[/dim]")
        return
    console.print(table)


@album.command(name="add")
@click.argument("name")
@click.option("--collection", "collection_ref", required=True, help="Collection name or ID")
@click.option("--description", "-d", default="", help="Album description")
@click.pass_context
def album_add(ctx: click.Context, name: str, collection_ref: str, description: str) -> None:
    """Add an album to a collection."""
    from hinged.models import Album

    library = _get_library(ctx)
    try:
        parent = _resolve_collection(library, collection_ref)
        sort_order = max((a.sort_order for a in library.albums_in(parent.id)), default=-1) + 1
        created = library.add_album(
            Album(
                name=name,
                description=description,
                collection_id=parent.id,
                sort_order=sort_order,
            )
        )
    except HingedError as e:
        _fail(e, "album add")

    _save(library)
    _info(ctx, f"[green]Added album:[/green] {escape(created.name)} [dim]({created.id})[/dim]")


@album.command(name="update")
@click.argument("ref")
@click.option("--name", default=None, help="New album name")
@click.option("--description", "-d", default=None, help="New description")
@click.option("--collection", "collection_ref", default=None, help="Move to this collection (name or ID)")
@click.pass_context
def album_update(
    ctx: click.Context,
    ref: str,
    name: str | None,
    description: str | None,
    collection_ref: str | None,
) -> None:
    """Rename an album, change its description or move it to another collection."""
    library = _get_library(ctx)
    try:
        target = _resolve_album(library, ref)
        fields: dict[str, Any] = {}
        if name is not None:
            fields["name"] = name
        if description is not None:
            fields["description"] = description
        if collection_ref is not None:
            fields["collection_id"] = _resolve_collection(library, collection_ref).id
        if not fields:
            raise HingedValueError("Nothing to update")
        updated = library.update_album(target.id, **fields)
    except HingedError as e:
        _fail(e, "album update")

    _save(library)
    _info(ctx, f"[green]Updated album:[/green] {escape(updated.name)}")


@album.command(name="remove")
@click.argument("ref")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def album_remove(ctx: click.Context, ref: str, yes: bool) -> None:
    """Remove an album and all of its stamps."""
    library = _get_library(ctx)
    try:
        target = _resolve_album(library, ref)
    except HingedError as e:
        _fail(e, "album remove")

    if not yes:
        counts = library.counts_for_album(target.id)
        click.confirm(f"Remove '{target.name}' and its {counts.total} stamp(s)?", abort=True)

    library.remove_album(target.id)
    _save(library)
    _info(ctx, f"[green]Removed album:[/green] {escape(target.name)}")


# ----------------------------------------------------------------------
# Stamps
# ----------------------------------------------------------------------


@main.group()
def stamp() -> None:
    """Manage stamps."""
    pass


def _stamp_field_options(func: Any) -> Any:
    """Options shared by `stamp add` and `stamp update`."""
    options = [
        click.option("--year", default=None, help='Issue year, e.g. "1958" or "1958-1964"'),
        click.option("--denomination", default=None, help="Face value, e.g. 5c"),
        click.option("--color", default=None, help="Stamp color"),
        click.option("--gum", type=_GUM_CHOICES, default=None, help="Gum condition"),
        click.option("--grade", type=_GRADE_CHOICES, default=None, help="Centering grade"),
        click.option("--status", type=_STATUS_CHOICES, default=None, help="Collection status"),
        click.option("--notes", default=None, help="Free-form notes"),
        click.option("--country", "country_ref", default=None, help="Country (worldwide collections)"),
        click.option("--perforation", default=None, help="Perforation gauge, e.g. 11.5"),
        click.option("--watermark", default=None, help="Watermark description"),
        click.option("--price", default=None, help="Purchase price"),
        click.option("--purchased", default=None, help="Purchase date (YYYY-MM-DD)"),
        click.option("--source", default=None, help="Where the stamp was acquired"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _stamp_fields(library: Library, **values: Any) -> dict[str, Any]:
    """Convert CLI option values into Stamp field values, skipping unset ones."""
    from hinged.csvio import parse_year_range

    fields: dict[str, Any] = {}
    if values.get("year") is not None:
        year_start, year_end = parse_year_range(values["year"])
        if year_start is None:
            raise HingedValueError(f"Invalid year {values['year']!r}")
        fields["year_start"] = year_start
        fields["year_end"] = year_end
    for name in ("denomination", "color", "notes", "watermark"):
        if values.get(name) is not None:
            fields[name] = values[name]
    if values.get("source") is not None:
        fields["acquisition_source"] = values["source"]
    if values.get("gum") is not None:
        fields["gum_condition"] = GumCondition(values["gum"])
    if values.get("grade") is not None:
        fields["centering_grade"] = CenteringGrade(values["grade"])
    if values.get("status") is not None:
        fields["collection_status"] = CollectionStatus(values["status"])
    if values.get("country_ref") is not None:
        fields["country_id"] = _resolve_country(library, values["country_ref"]).id
    if values.get("perforation") is not None:
        fields["perforation_gauge"] = _parse_decimal(values["perforation"], "perforation gauge")
    if values.get("price") is not None:
        fields["purchase_price"] = _parse_decimal(values["price"], "price")
    if values.get("purchased") is not None:
        fields["purchase_date"] = _parse_date(values["purchased"])
    return fields


@stamp.command(name="list")
@click.option("--album", "album_ref", default=None, help="Album name or ID")
@click.option("--collection", "collection_ref", default=None, help="Collection name or ID")
@click.option("--smart", type=_SMART_CHOICES, default=None, help="Smart collection across the library")
@click.option("--search", "-s", default="", help="Match catalog number, country or year")
@click.option("--gum", type=_GUM_CHOICES, default=None, help="Gum condition")
@click.option("--grade", type=_GRADE_CHOICES, default=None, help="Centering grade")
@click.option("--status", type=_STATUS_CHOICES, default=None, help="Collection status")
@click.option("--country", "country_ref", default=None, help="Country name or ID")
@click.option("--year-start", type=int, default=None, help="Earliest issue year")
@click.option("--year-end", type=int, default=None, help="Latest issue year")
@click.option("--from", "catalog_start", default="", help="First catalog number, e.g. C1")
@click.option("--to", "catalog_end", default="", help="Last catalog number, e.g. C50")
@click.option("--desc", is_flag=True, help="Sort catalog numbers in reverse")
@_FORMAT_OPTION
@click.pass_context
def stamp_list(
    ctx: click.Context,
    album_ref: str | None,
    collection_ref: str | None,
    smart: str | None,
    search: str,
    gum: str | None,
    grade: str | None,
    status: str | None,
    country_ref: str | None,
    year_start: int | None,
    year_end: int | None,
    catalog_start: str,
    catalog_end: str,
    desc: bool,
    output_format: str,
) -> None:
    """List stamps, filtered and sorted by catalog number."""
    from hinged.filters import StampFilter, smart_collection
    from hinged.output import StampListFormatter

    library = _get_library(ctx)
    settings = _get_settings(ctx)
    title = "Stamps"

    try:
        if smart:
            smart_type = SmartCollectionType(smart)
            stamps = smart_collection(library, smart_type, recent_days=settings.options.recent_days)
            title = smart_type.display_name
        elif album_ref:
            target_album = _resolve_album(library, album_ref)
            stamps = library.list_stamps(album_id=target_album.id)
            title = target_album.name
        elif collection_ref:
            target_collection = _resolve_collection(library, collection_ref)
            stamps = library.list_stamps(collection_id=target_collection.id)
            title = target_collection.name
        else:
            stamps = library.list_stamps()

        stamp_filter = StampFilter(
            search_text=search,
            gum_condition=GumCondition(gum) if gum else None,
            centering_grade=CenteringGrade(grade) if grade else None,
            country_id=_resolve_country(library, country_ref).id if country_ref else None,
            collection_status=CollectionStatus(status) if status else None,
            year_start=year_start,
            year_end=year_end,
            catalog_start=catalog_start,
            catalog_end=catalog_end,
        )
    except HingedError as e:
        _fail(e, "stamp list")

    stamps = stamp_filter.apply(library, stamps)
    if desc:
        stamps.reverse()

    formatter = StampListFormatter(library, stamps, title=title, output=console)
    if output_format == "json":
        console.print_json(formatter.to_json())
    elif output_format == "csv":
        console.print(formatter.to_csv(), markup=False, highlight=False, soft_wrap=True, end="")
    else:
        formatter.to_text(verbose=ctx.obj.get("verbose", False))


@stamp.command(name="add")
@click.argument("catalog_number")
@click.option("--album", "album_ref", required=True, help="Album name or ID")
@_stamp_field_options
@click.pass_context
def stamp_add(ctx: click.Context, catalog_number: str, album_ref: str, **values: Any) -> None:
    """Add a stamp to an album."""
    from hinged.models import Stamp

    library = _get_library(ctx)
    settings = _get_settings(ctx)
    try:
        target_album = _resolve_album(library, album_ref)
        fields = settings.stamp_defaults()
        fields.update(_stamp_fields(library, **values))
        created = library.add_stamp(
            Stamp(catalog_number=catalog_number.strip(), album_id=target_album.id, **fields)
        )
    except HingedError as e:
        _fail(e, "stamp add")

    _save(library)
    _info(
        ctx,
        f"[green]Added stamp:[/green] {escape(library.display_catalog_number(created))} "
        f"[dim]({created.id})[/dim]",
    )


@stamp.command(name="update")
@click.argument("stamp_id")
@click.option("--catalog-number", default=None, help="New catalog number")
@click.option("--album", "album_ref", default=None, help="Move to this album (name or ID)")
@_stamp_field_options
@click.pass_context
def stamp_update(
    ctx: click.Context,
    stamp_id: str,
    catalog_number: str | None,
    album_ref: str | None,
    **values: Any,
) -> None:
    """Change fields of an existing stamp."""
    library = _get_library(ctx)
    try:
        target = library.get_stamp(stamp_id)
        fields = _stamp_fields(library, **values)
        if catalog_number is not None:
            fields["catalog_number"] = catalog_number.strip()
        if album_ref is not None:
            fields["album_id"] = _resolve_album(library, album_ref).id
        library.update_stamp(target.id, **fields)
    except HingedError as e:
        _fail(e, "stamp update")

    _save(library)
    _info(ctx, f"[green]Updated stamp:[/green] {escape(library.display_catalog_number(target))}")


@stamp.command(name="show")
@click.argument("stamp_id")
@click.pass_context
def stamp_show(ctx: click.Context, stamp_id: str) -> None:
    """Show every field of a stamp."""
    library = _get_library(ctx)
    settings = _get_settings(ctx)
    try:
        target = library.get_stamp(stamp_id)
    except HingedError as e:
        _fail(e, "stamp show")

    country = library.collection_country(target)
    system = library.catalog_system_for(target)
    currency = settings.defaults.currency_symbol

    console.print(f"[bold]{escape(library.display_catalog_number(target))}[/bold]")
    lines = [
        (system.catalog_number_label, target.catalog_number),
        ("Country", country.name if country else ""),
        ("Year", target.display_year),
        ("Denomination", target.denomination),
        ("Color", target.color),
        ("Perforation", str(target.perforation_gauge or "")),
        ("Watermark", target.watermark or ""),
        ("Gum", target.gum_condition.display_name),
        ("Centering", target.centering_grade.display_name),
        ("Status", target.collection_status.display_name),
        ("Price", f"{currency}{target.purchase_price}" if target.purchase_price is not None else ""),
        ("Purchased", target.purchase_date.isoformat() if target.purchase_date else ""),
        ("Source", target.acquisition_source),
        ("Notes", target.notes),
    ]
    for label, value in lines:
        if value:
            console.print(f"  [dim]{label}:[/dim] {escape(value)}")


@stamp.command(name="remove")
@click.argument("stamp_id")
@click.pass_context
def stamp_remove(ctx: click.Context, stamp_id: str) -> None:
    """Remove a stamp by ID."""
    library = _get_library(ctx)
    try:
        target = library.get_stamp(stamp_id)
        library.remove_stamp(stamp_id)
    except HingedError as e:
        _fail(e, "stamp remove")

    _save(library)
    _info(ctx, f"[green]Removed stamp:[/green] {escape(target.catalog_number)}")


@main.command()
@click.argument("album_ref")
@click.argument("start", type=int)
@click.argument("end", type=int)
@click.option("--prefix", default="", help='Series prefix, e.g. "C" for airmail')
@click.option(
    "--status",
    type=_STATUS_CHOICES,
    default=CollectionStatus.WANTED.value,
    help="Status for the new stamps",
)
@click.pass_context
def populate(
    ctx: click.Context,
    album_ref: str,
    start: int,
    end: int,
    prefix: str,
    status: str,
) -> None:
    """Fill an album with a run of catalog numbers, START to END."""
    library = _get_library(ctx)
    try:
        target_album = _resolve_album(library, album_ref)
        created = library.populate_range(
            target_album.id,
            start,
            end,
            prefix=prefix.strip(),
            status=CollectionStatus(status),
        )
    except HingedError as e:
        _fail(e, "populate")

    _save(library)
    _info(
        ctx,
        f"[green]Added {len(created)} stamps[/green] "
        f"({escape(prefix)}{start} to {escape(prefix)}{end}) to {escape(target_album.name)}",
    )


# ----------------------------------------------------------------------
# CSV
# ----------------------------------------------------------------------


@main.group(name="csv")
def csv_group() -> None:
    """Import and export stamp lists as CSV."""
    pass


@csv_group.command(name="export")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--album", "album_ref", default=None, help="Album name or ID")
@click.option("--collection", "collection_ref", default=None, help="Collection name or ID")
@click.pass_context
def csv_export(
    ctx: click.Context,
    output: Path,
    album_ref: str | None,
    collection_ref: str | None,
) -> None:
    """Export stamps to a CSV file."""
    from hinged.catalog import NaturalCatalogComparator
    from hinged.csvio import save_csv

    library = _get_library(ctx)
    try:
        if album_ref:
            stamps = library.list_stamps(album_id=_resolve_album(library, album_ref).id)
        elif collection_ref:
            stamps = library.list_stamps(
                collection_id=_resolve_collection(library, collection_ref).id
            )
        else:
            stamps = library.list_stamps()
        stamps = NaturalCatalogComparator().sorted(stamps, key=lambda s: s.catalog_number)
        save_csv(library, stamps, output)
    except (HingedError, OSError) as e:
        _fail(e, "csv export")

    _info(ctx, f"[green]Exported {len(stamps)} stamps to[/green] {output}")


@csv_group.command(name="import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--album", "album_ref", required=True, help="Album name or ID")
@click.option(
    "--duplicates",
    type=click.Choice(["skip", "update", "create"]),
    default="skip",
    help="What to do with catalog numbers already in the album",
)
@click.pass_context
def csv_import(ctx: click.Context, source: Path, album_ref: str, duplicates: str) -> None:
    """Import stamps from a CSV file into an album."""
    from hinged.csvio import DuplicateAction, load_csv

    library = _get_library(ctx)
    settings = _get_settings(ctx)
    try:
        target_album = _resolve_album(library, album_ref)
        summary = load_csv(
            library,
            target_album.id,
            source,
            duplicate_action=DuplicateAction(duplicates),
            default_status=settings.defaults.collection_status,
        )
    except (HingedError, OSError) as e:
        _fail(e, "csv import")

    _save(library)
    _info(ctx, f"[green]CSV import:[/green] {summary}")


# ----------------------------------------------------------------------
# Backup
# ----------------------------------------------------------------------


@main.group()
def backup() -> None:
    """Back up and restore the whole library."""
    pass


@backup.command(name="create")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_context
def backup_create(ctx: click.Context, output: Path | None) -> None:
    """Write a backup file (default: Hinged-Backup-<date>.hingedbackup)."""
    from hinged.backup import BACKUP_EXTENSION, create_backup, save_backup

    library = _get_library(ctx)
    if output is None:
        output = Path.cwd() / f"Hinged-Backup-{date.today().isoformat()}{BACKUP_EXTENSION}"

    snapshot = create_backup(library)
    try:
        save_backup(snapshot, output)
    except OSError as e:
        _fail(e, "backup create")

    _info(
        ctx,
        f"[green]Backup saved:[/green] {output} "
        f"({len(snapshot.collections)} collections, {len(snapshot.albums)} albums, "
        f"{len(snapshot.stamps)} stamps)",
    )


@backup.command(name="restore")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--mode",
    type=click.Choice(["merge", "replace"]),
    default="merge",
    help="merge keeps existing data; replace deletes it first",
)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def backup_restore(ctx: click.Context, source: Path, mode: str, yes: bool) -> None:
    """Restore records from a backup file."""
    from hinged.backup import ImportMode, load_backup, restore_backup

    library = _get_library(ctx)
    try:
        snapshot = load_backup(source)
    except (HingedError, OSError) as e:
        _fail(e, "backup restore")

    import_mode = ImportMode(mode)
    if import_mode is ImportMode.REPLACE and not yes:
        click.confirm("This will delete all existing data. Continue?", abort=True)

    try:
        result = restore_backup(library, snapshot, import_mode)
    except HingedError as e:
        _fail(e, "backup restore")

    _save(library)
    _info(ctx, f"[green]{result.summary}[/green]")
    if result.total_skipped:
        _info(ctx, f"[dim]Skipped {result.total_skipped} record(s)[/dim]")


# ----------------------------------------------------------------------
# Gap analysis
# ----------------------------------------------------------------------


@main.command()
@click.argument("country_ref")
@click.option("--from", "start_year", type=int, default=None, help="First issue year")
@click.option("--to", "end_year", type=int, default=None, help="Last issue year")
@click.option(
    "--preset",
    type=click.Choice(["classic", "modern", "recent"]),
    default=None,
    help="Year range preset (classic 1840-1940, modern 1941-2000, recent 2001-now)",
)
@click.option("--save-csv", is_flag=True, help="Also save the report as CSV")
@_FORMAT_OPTION
@click.pass_context
def gaps(
    ctx: click.Context,
    country_ref: str,
    start_year: int | None,
    end_year: int | None,
    preset: str | None,
    save_csv: bool,
    output_format: str,
) -> None:
    """Show the want list and numbering gaps for a country."""
    from hinged.gaps import GapReportFinder, year_presets
    from hinged.gaps.report import FIRST_ISSUE_YEAR
    from hinged.output import GapReportFormatter

    library = _get_library(ctx)
    settings = _get_settings(ctx)

    if preset:
        preset_start, preset_end = year_presets()[preset]
        start_year = start_year if start_year is not None else preset_start
        end_year = end_year if end_year is not None else preset_end

    try:
        target = _resolve_country(library, country_ref)
        finder = GapReportFinder(library, settings)
        report = finder.find_gaps(
            target.id,
            start_year if start_year is not None else FIRST_ISSUE_YEAR,
            end_year,
        )
    except HingedError as e:
        _fail(e, "gaps")

    formatter = GapReportFormatter(report, display_limit=settings.gaps.display_limit, output=console)
    if output_format == "json":
        console.print_json(formatter.to_json())
    elif output_format == "csv":
        console.print(formatter.to_csv(), markup=False, highlight=False, soft_wrap=True, end="")
    else:
        formatter.to_text(verbose=ctx.obj.get("verbose", False))

    if save_csv:
        try:
            csv_path = formatter.save_csv()
        except OSError as e:
            _fail(e, "gaps csv")
        _info(ctx, f"[green]CSV saved:[/green] {csv_path}")


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------


@main.group()
def config() -> None:
    """Manage Hinged configuration."""
    pass


@config.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    cfg = _get_settings(ctx)

    console.print("[bold]Current Configuration[/bold]")
    console.print()

    if cfg.source_path:
        console.print(f"[dim]Config file:[/dim] {cfg.source_path}")
    else:
        console.print("[dim]Config file:[/dim] (none - using defaults)")
    console.print(f"[dim]Library file:[/dim] {ctx.obj.get('library_path') or cfg.library_path()}")
    console.print()

    # Defaults
    console.print("[bold]Defaults:[/bold]")
    if cfg.defaults.custom_catalog_name:
        console.print(f"  Catalog: {escape(cfg.defaults.custom_catalog_name)} (custom)")
    else:
        console.print(f"  Catalog: {cfg.defaults.effective_catalog_system.display_name}")
    console.print(f"  Status: {cfg.defaults.collection_status.display_name}")
    gum = cfg.defaults.gum_condition
    grade = cfg.defaults.centering_grade
    console.print(f"  Gum condition: {gum.display_name if gum else '(none)'}")
    console.print(f"  Centering grade: {grade.display_name if grade else '(none)'}")
    console.print(f"  Currency symbol: {escape(cfg.defaults.currency_symbol)}")
    console.print()

    # Gaps
    console.print("[bold]Gap analysis:[/bold]")
    console.print(f"  Max span: {cfg.gaps.max_span}")
    console.print(f"  Display limit: {cfg.gaps.display_limit}")
    console.print()

    # Options
    console.print("[bold]Options:[/bold]")
    console.print(f"  Recent additions: {cfg.options.recent_days} days")


@config.command(name="path")
def config_path() -> None:
    """Show configuration file paths."""
    from hinged.config import find_config_file, get_config_dir, get_config_paths

    console.print("[bold]Configuration paths (in priority order):[/bold]")
    config_file = find_config_file()

    for path in get_config_paths():
        if path.exists():
            if path == config_file:
                console.print(f"  [green]{path}[/green] (active)")
            else:
                console.print(f"  {path} (exists)")
        else:
            console.print(f"  [dim]{path}[/dim]")

    console.print()
    console.print("[bold]Other paths:[/bold]")
    console.print(f"  Config dir: {get_config_dir()}")
    console.print(f"  .env file: {Path.cwd() / '.env'}")


@config.command(name="init")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(path: Path | None, force: bool) -> None:
    """Create a default configuration file (default: ./hinged.ini)."""
    from hinged.config import save_default_config

    config_file = path or Path.cwd() / "hinged.ini"

    if config_file.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {config_file}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    try:
        save_default_config(config_file)
    except OSError as e:
        _fail(e, "config init")
    console.print(f"[green]Created config file:[/green] {config_file}")
    console.print("Edit this file to customize your settings.")


if __name__ == "__main__":
    main()
