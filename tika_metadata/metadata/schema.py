"""Metadata schema registry.

Every metadata record carries the base fields, a modified Dublin Core set
shared by all file types. Variants for supported file types add supplementary
fields stored in their own table. Each field declares the raw Tika keys it may
be populated from, highest priority first. Tika is inconsistent about key
naming across parsers and versions, so alias lists can be long; resolution
always takes the first alias present in the raw metadata.
"""

from dataclasses import dataclass
from typing import Optional

from tika_metadata.core.enums import FieldKind, FileType
from tika_metadata.core.exceptions import ConfigurationError
from tika_metadata.filetypes import BASE_VARIANT, SUPPORTED_FILETYPES

BASE_TABLE = "metadataextractor_tika"


@dataclass(frozen=True)
class FieldSpec:
    """A typed metadata field and its ordered raw key aliases."""

    name: str
    aliases: tuple[str, ...]
    kind: FieldKind = FieldKind.TEXT


@dataclass(frozen=True)
class VariantSchema:
    """Supplementary fields and table of one metadata record variant."""

    tag: str
    supplementary_fields: tuple[FieldSpec, ...] = ()
    supplementary_table: Optional[str] = None

    @property
    def has_supplementary_data(self) -> bool:
        return bool(self.supplementary_fields)


def _text(name: str, *aliases: str) -> FieldSpec:
    return FieldSpec(name, aliases, FieldKind.TEXT)


def _integer(name: str, *aliases: str) -> FieldSpec:
    return FieldSpec(name, aliases, FieldKind.INTEGER)


def _timestamp(name: str, *aliases: str) -> FieldSpec:
    return FieldSpec(name, aliases, FieldKind.TIMESTAMP)


BASE_FIELDS: tuple[FieldSpec, ...] = (
    _text("format", "dc:format", "Content-Type"),
    _text("type", "dc:type"),
    _text("title", "dc:title", "Title", "title", "meta:title", "resourceName", "pdf:title"),
    _text("creator", "dc:creator", "Creator", "creator", "meta:creator", "Author", "author",
          "meta:author"),
    _text("contributor", "dc:contributor", "meta:last-author", "Last-Author"),
    _text("subject", "dc:subject", "Subject", "subject", "meta:subject", "Keywords", "meta:keyword",
          "cp:subject"),
    _text("description", "dc:description", "Description", "description", "meta:description",
          "Comments", "comment"),
    _text("publisher", "dc:publisher", "Publisher", "publisher", "meta:publisher",
          "custom:Publisher", "extended-properties:Company"),
    _text("rights", "dc:rights", "Rights", "rights", "meta:rights", "License", "license",
          "meta:license", "custom:Rights", "custom:rights", "extended-properties:Rights",
          "extended-properties:rights", "custom:License", "custom:license", "extended-properties:License",
          "extended-properties:license", "xmpRights:UsageTerms"),
    _text("language", "dc:language", "Language", "language", "meta:language", "Content-Language"),
    _timestamp("resourcecreated", "dcterms:created", "meta:creation-date", "Creation-Date",
               "created", "pdf:docinfo:created", "xmp:CreateDate", "dc:date"),
    _timestamp("resourcemodified", "dcterms:modified", "meta:save-date", "Last-Save-Date",
               "Last-Modified", "modified", "pdf:docinfo:modified", "xmp:ModifyDate"),
)

_PAGECOUNT = _integer("pagecount", "Page-Count", "meta:page-count", "xmpTPg:NPages")
_PARAGRAPHCOUNT = _integer("paragraphcount", "Paragraph-Count", "meta:paragraph-count")
_WORDCOUNT = _integer("wordcount", "Word-Count", "meta:word-count")
_LASTAUTHOR = _text("lastauthor", "Last-Author", "meta:last-author")
_APPLICATION = _text("application", "Application-Name", "extended-properties:Application",
                     "generator")
_APPVERSION = _text("appversion", "Application-Version", "extended-properties:AppVersion")
_REVISIONNUMBER = _integer("revisionnumber", "Revision-Number", "cp:revision", "editing-cycles")
_MANAGER = _text("manager", "Manager", "meta:manager", "meta:Manager", "custom:manager",
                 "custom:Manager", "extended-properties:Manager", "extended-properties:manager")
_COMPANY = _text("company", "Company", "meta:company", "meta:Company", "custom:Company",
                 "custom:company", "extended-properties:Company", "extended-properties:company")
_HEIGHT = _text("height", "tiff:ImageLength", "Image Height", "height")
_WIDTH = _text("width", "tiff:ImageWidth", "Image Width", "width")
_BITSPERSAMPLE = _text("bitspersample", "tiff:BitsPerSample", "Data Precision")
_LOCATION = _text("location", "xmpDM:shotLocation", "tiff:GPSAreaInformation")
_DURATION = _text("duration", "xmpDM:duration", "duration")
_SAMPLERATE = _text("samplerate", "xmpDM:audioSampleRate", "samplerate")
_CHANNELS = _integer("channels", "channels", "xmpDM:audioChannelType")

SUPPLEMENTARY_FIELDS: dict[FileType, tuple[FieldSpec, ...]] = {
    FileType.DOCUMENT: (
        _PAGECOUNT,
        _PARAGRAPHCOUNT,
        _integer("linecount", "Line-Count", "meta:line-count"),
        _WORDCOUNT,
        _integer("charactercount", "Character-Count", "meta:character-count", "Character Count"),
        _integer("charactercountwithspaces", "Character-Count-With-Spaces",
                 "meta:character-count-with-spaces"),
        _MANAGER,
        _COMPANY,
    ),
    FileType.PDF: (
        _PAGECOUNT,
        _text("creationtool", "xmp:CreatorTool", "pdf:docinfo:creator_tool", "producer",
              "pdf:docinfo:producer"),
        _text("pdfversion", "pdf:PDFVersion"),
    ),
    FileType.PRESENTATION: (
        _integer("slidecount", "Slide-Count", "meta:slide-count", "xmpTPg:NPages"),
        _PARAGRAPHCOUNT,
        _WORDCOUNT,
        _LASTAUTHOR,
        _APPLICATION,
        _APPVERSION,
        _text("edittime", "Total-Time", "extended-properties:TotalTime", "Edit-Time"),
        _REVISIONNUMBER,
        _integer("notecount", "Notes", "extended-properties:Notes"),
        _text("presentationformat", "Presentation-Format",
              "extended-properties:PresentationFormat"),
        _MANAGER,
        _COMPANY,
    ),
    FileType.SPREADSHEET: (
        _REVISIONNUMBER,
        _APPLICATION,
        _APPVERSION,
        _LASTAUTHOR,
        _MANAGER,
        _COMPANY,
    ),
    FileType.IMAGE: (
        _HEIGHT,
        _WIDTH,
        _BITSPERSAMPLE,
        _LOCATION,
    ),
    FileType.AUDIO: (
        _DURATION,
        _SAMPLERATE,
        _CHANNELS,
        _LOCATION,
    ),
    FileType.VIDEO: (
        _HEIGHT,
        _WIDTH,
        _BITSPERSAMPLE,
        _DURATION,
        _SAMPLERATE,
        _CHANNELS,
        _text("framesize", "xmpDM:videoFrameSize"),
        _LOCATION,
    ),
}


class SchemaRegistry:
    """Lookup of base and supplementary key maps per record variant."""

    def __init__(
        self,
        base_fields: tuple[FieldSpec, ...],
        supplementary_fields: dict[FileType, tuple[FieldSpec, ...]],
        base_table: str = BASE_TABLE,
    ) -> None:
        self.base_table = base_table
        self.base_fields = base_fields
        self._variants: dict[str, VariantSchema] = {BASE_VARIANT: VariantSchema(BASE_VARIANT)}

        for filetype, fields in supplementary_fields.items():
            self._variants[filetype.value] = VariantSchema(
                tag=filetype.value,
                supplementary_fields=fields,
                supplementary_table=f"tika_{filetype.value}_metadata",
            )

    @property
    def variants(self) -> list[VariantSchema]:
        return list(self._variants.values())

    def get(self, tag: str) -> VariantSchema:
        """Get the schema of a variant.

        Raises:
            ConfigurationError: If no variant is registered under the tag.
        """
        try:
            return self._variants[tag]
        except KeyError:
            raise ConfigurationError(f"No metadata variant registered for '{tag}'")

    def base_key_map(self) -> dict[str, list[str]]:
        """Field name to ordered raw key aliases for the base fields."""
        return {spec.name: list(spec.aliases) for spec in self.base_fields}

    def supplementary_key_map(self, tag: str) -> dict[str, list[str]]:
        """Field name to ordered raw key aliases for a variant's supplementary fields."""
        return {spec.name: list(spec.aliases) for spec in self.get(tag).supplementary_fields}

    def key_map(self, tag: str) -> dict[str, list[str]]:
        """Merged key map, base fields first then supplementary fields."""
        key_map = self.base_key_map()
        key_map.update(self.supplementary_key_map(tag))
        return key_map

    def field_specs(self, tag: str) -> tuple[FieldSpec, ...]:
        return self.base_fields + self.get(tag).supplementary_fields

    def validate(self) -> None:
        """Check every variant's schema is consistent.

        Raises:
            ConfigurationError: If a supplementary field shadows a base field, a
                field is declared twice, a field has no aliases, or a supported
                file type has no variant.
        """
        base_names = [spec.name for spec in self.base_fields]
        if len(set(base_names)) != len(base_names):
            raise ConfigurationError("Duplicate base metadata field")

        reserved = set(base_names) | {"id", "resourcehash", "timecreated", "timemodified"}

        for variant in self.variants:
            names = [spec.name for spec in variant.supplementary_fields]
            overlap = reserved.intersection(names)
            if overlap:
                raise ConfigurationError(
                    f"Supplementary fields of '{variant.tag}' shadow base fields: {sorted(overlap)}"
                )
            if len(set(names)) != len(names):
                raise ConfigurationError(f"Duplicate supplementary field in '{variant.tag}'")

        for spec in self.field_specs(BASE_VARIANT) + tuple(
            spec for variant in self.variants for spec in variant.supplementary_fields
        ):
            if not spec.aliases:
                raise ConfigurationError(f"Metadata field '{spec.name}' has no raw key aliases")

        missing = [ft.value for ft in SUPPORTED_FILETYPES if ft.value not in self._variants]
        if missing:
            raise ConfigurationError(f"No metadata variant for supported file types: {sorted(missing)}")


registry = SchemaRegistry(BASE_FIELDS, SUPPLEMENTARY_FIELDS)
registry.validate()
