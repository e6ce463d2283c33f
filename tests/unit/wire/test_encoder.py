"""Tests for the NeXML encoder."""

import xml.etree.ElementTree as ET

from phylodoc.core.config import WriterConfig
from phylodoc.namespaces import NEXML_URI, XSI_URI
from phylodoc.wire import encode, write

NS = {"nex": NEXML_URI}
XSI_TYPE = f"{{{XSI_URI}}}type"


def _parse(data: bytes) -> ET.Element:
    return ET.fromstring(data)


class TestEncode:
    """Tests for encode."""

    def test_root_element(self, full_document):
        """The root should be nex:nexml with version and generator."""
        root = _parse(encode(full_document))

        assert root.tag == f"{{{NEXML_URI}}}nexml"
        assert root.get("version") == "0.9"
        assert root.get("generator") == "phylodoc"

    def test_xml_declaration(self, full_document):
        """Output should start with an XML declaration."""
        assert encode(full_document).startswith(b"<?xml")

    def test_declares_every_namespace(self, full_document):
        """Every registry binding should be declared on the root."""
        data = encode(full_document).decode("utf-8")
        for prefix, uri in full_document.namespaces.snapshot().items():
            assert f'xmlns:{prefix}="{uri}"' in data

    def test_block_order(self, full_document):
        """OTUs come first, then characters, then trees."""
        root = _parse(encode(full_document))
        names = [child.tag.split("}")[1] for child in root if not child.tag.endswith("meta")]
        assert names == ["otus", "characters", "characters", "trees"]

    def test_characters_types(self, full_document):
        """Each matrix should carry its cell type."""
        root = _parse(encode(full_document))
        types = [c.get(XSI_TYPE) for c in root.findall("nex:characters", NS)]
        assert types == ["nex:StandardCells", "nex:ContinuousCells"]

    def test_missing_cells_not_written(self, full_document):
        """A row without a value for a character should have no cell."""
        root = _parse(encode(full_document))
        continuous = root.findall("nex:characters", NS)[1]
        rows = continuous.findall("nex:matrix/nex:row", NS)
        assert [len(row.findall("nex:cell", NS)) for row in rows] == [1, 1, 0]

    def test_literal_meta(self, full_document):
        """Literal annotations carry datatype and text."""
        root = _parse(encode(full_document))
        title = root.find("nex:meta", NS)

        assert title.get(XSI_TYPE) == "nex:LiteralMeta"
        assert title.get("property") == "dc:title"
        assert title.get("datatype") == "xsd:string"
        assert title.text == "Test study"

    def test_nested_resource_meta(self, full_document):
        """Resource annotations nest their children."""
        root = _parse(encode(full_document))
        creator = root.findall("nex:meta", NS)[1]

        assert creator.get(XSI_TYPE) == "nex:ResourceMeta"
        assert creator.get("rel") == "dc:creator"
        assert creator.get("href") is None
        assert [m.get("property") or m.get("rel") for m in creator] == ["foaf:name", "foaf:mbox"]

    def test_pretty_output(self, full_document):
        """pretty=True should indent the output."""
        data = encode(full_document, WriterConfig(pretty=True))
        assert b"\n  <otus" in data

    def test_write(self, full_document, nexml_path):
        """write should store the encoded bytes."""
        write(full_document, nexml_path)
        assert nexml_path.read_bytes() == encode(full_document)
