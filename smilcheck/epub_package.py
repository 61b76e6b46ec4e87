import os
import shutil
import tempfile
import urllib.parse
import zipfile
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from lxml import etree

from .errors import PackageDocumentError, UnzipError


CONTAINER_PATH = os.path.join("META-INF", "container.xml")
SMIL_MEDIA_TYPE = "application/smil+xml"


def _check_member_paths(archive: zipfile.ZipFile, dest: str) -> None:
    root = os.path.realpath(dest)
    for name in archive.namelist():
        target = os.path.realpath(os.path.join(root, name))
        if os.path.commonpath([root, target]) != root:
            raise UnzipError(f"Archive entry {name!r} escapes the extraction directory.")


def unzip_epub(epub_path: str, dest_root: Optional[str] = None) -> str:
    """Extract an EPUB into a fresh scratch directory and return its path."""
    dest = tempfile.mkdtemp(prefix="smilcheck_", dir=dest_root)
    try:
        with zipfile.ZipFile(epub_path, "r") as archive:
            _check_member_paths(archive, dest)
            archive.extractall(dest)
    except UnzipError:
        shutil.rmtree(dest, ignore_errors=True)
        raise
    except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
        shutil.rmtree(dest, ignore_errors=True)
        raise UnzipError(f"{epub_path}: {exc}") from exc
    return dest


def _read_xml(path: str, description: str) -> BeautifulSoup:
    try:
        with open(path, "rb") as xml_file:
            data = xml_file.read()
    except OSError as exc:
        raise PackageDocumentError(f"Cannot read {description} {path}: {exc}") from exc

    if not data.strip():
        raise PackageDocumentError(f"Empty {description} {path}.")

    try:
        etree.fromstring(
            data, parser=etree.XMLParser(resolve_entities=False, no_network=True)
        )
        document = BeautifulSoup(data, "xml")
    except (etree.XMLSyntaxError, ParserRejectedMarkup) as exc:
        raise PackageDocumentError(f"Cannot parse {description} {path}: {exc}") from exc
    if document.find() is None:
        raise PackageDocumentError(f"Cannot parse {description} {path}.")
    return document


def read_container(root_dir: str) -> str:
    """Return the package document path named by META-INF/container.xml."""
    container = _read_xml(os.path.join(root_dir, CONTAINER_PATH), "container")
    rootfile = container.find("rootfile", attrs={"full-path": True})
    if rootfile is None or not rootfile["full-path"].strip():
        raise PackageDocumentError("Missing rootfile full-path in container.xml.")
    return os.path.normpath(os.path.join(root_dir, rootfile["full-path"].strip()))


def _manifest_items(package: Any) -> Dict[str, Any]:
    manifest = package.find("manifest", recursive=False)
    if manifest is None:
        raise PackageDocumentError("Package document has no manifest.")

    items: Dict[str, Any] = {}
    for item in manifest.find_all("item", recursive=False):
        item_id = item.get("id")
        if item_id and item_id not in items:
            items[item_id] = item
    return items


def resolve_smil_paths(package_path: str) -> List[str]:
    """Return the SMIL overlay files of the spine, in reading order."""
    document = _read_xml(package_path, "package document")
    package = document.find("package")
    if package is None:
        raise PackageDocumentError(f"No package element in {package_path}.")

    spine = package.find("spine", recursive=False)
    if spine is None:
        raise PackageDocumentError(f"No spine element in {package_path}.")

    items = _manifest_items(package)
    package_dir = os.path.dirname(package_path)
    smil_paths: List[str] = []

    for itemref in spine.find_all("itemref", recursive=False):
        content_item = items.get(itemref.get("idref", ""))
        if content_item is None:
            continue

        overlay_id = content_item.get("media-overlay")
        if not overlay_id:
            continue

        overlay_item = items.get(overlay_id)
        if overlay_item is None or overlay_item.get("media-type") != SMIL_MEDIA_TYPE:
            continue

        href = overlay_item.get("href")
        if not href:
            continue
        smil_paths.append(
            os.path.normpath(os.path.join(package_dir, urllib.parse.unquote(href)))
        )

    return smil_paths


def find_smil_files(root_dir: str) -> Tuple[str, List[str]]:
    package_path = read_container(root_dir)
    return package_path, resolve_smil_paths(package_path)
