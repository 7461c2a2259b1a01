from __future__ import annotations
from typing import List, Dict, Any, Optional, Tuple, Callable
import io

from pypdf import PdfReader
from pypdf.generic import NameObject

from config import FF_MULTILINE, FF_RADIO, FF_PUSHBUTTON, DEFAULT_BACKEND
from .schema import RawWidget
from .errors import DocumentLoadError, NotPDFError, EncryptedPDFError

# Field attributes a terminal field inherits from its ancestors
INHERITABLE_KEYS = ("/FT", "/Ff", "/V", "/Opt")

OFF_STATE = "Off"

SkipCallback = Callable[[str, str], None]


def _resolve(obj: Any) -> Any:
    return obj.get_object() if hasattr(obj, "get_object") else obj


def _check_header(pdf_bytes: bytes):
    if not pdf_bytes:
        raise NotPDFError("Empty document buffer")
    if b"%PDF" not in bytes(pdf_bytes[:1024]):
        raise NotPDFError("Buffer has no PDF header")


def _as_text(value: Any) -> Optional[str]:
    """Decode a PDF value (text string, name, byte string, array) to plain text."""
    if value is None:
        return None
    value = _resolve(value)
    if isinstance(value, list):
        return _as_text(value[0]) if value else None
    if isinstance(value, bytes):
        return value.decode("latin-1")
    if isinstance(value, NameObject):
        return str(value)[1:]
    return str(value)


def _on_state(value: Any) -> Optional[str]:
    text = _as_text(value)
    if not text or text == OFF_STATE:
        return None
    return text


def _choice_options(opt: Any) -> Tuple[str, ...]:
    """/Opt entries are either text or [export, display] pairs; prefer display text."""
    options: List[str] = []
    for entry in _resolve(opt) or []:
        entry = _resolve(entry)
        if isinstance(entry, list):
            text = _as_text(entry[1] if len(entry) > 1 else entry[0] if entry else None)
        else:
            text = _as_text(entry)
        if text is not None:
            options.append(text)
    return tuple(options)


def _appearance_states(node: Any) -> List[str]:
    states: List[str] = []
    widgets = _resolve(node.get("/Kids")) or [node]
    for ref in widgets:
        widget = _resolve(ref)
        ap = _resolve(widget.get("/AP"))
        normal = _resolve(ap.get("/N")) if ap else None
        if not normal or not hasattr(normal, "keys"):
            continue
        for key in normal.keys():
            state = _as_text(key)
            if state and state != OFF_STATE and state not in states:
                states.append(state)
    return states


def _to_widget(name: str, attrs: Dict[str, Any], node: Any, on_skip: Optional[SkipCallback]) -> Optional[RawWidget]:
    ft = _as_text(attrs.get("/FT"))
    flags = int(attrs.get("/Ff") or 0)

    if ft == "Tx":
        kind = "multiline-text" if flags & FF_MULTILINE else "text"
        return RawWidget(name=name, kind=kind, value=_as_text(attrs.get("/V")))
    if ft == "Ch":
        options = _choice_options(attrs.get("/Opt")) if attrs.get("/Opt") else ()
        return RawWidget(name=name, kind="dropdown", value=_as_text(attrs.get("/V")), options=options)
    if ft == "Btn":
        if flags & FF_PUSHBUTTON:
            if on_skip:
                on_skip(name, "pushbutton")
            return None
        if flags & FF_RADIO:
            opt = attrs.get("/Opt")
            options = _choice_options(opt) if opt else tuple(_appearance_states(node))
            return RawWidget(name=name, kind="radio-group", value=_on_state(attrs.get("/V")), options=options)
        return RawWidget(name=name, kind="checkbox", value=_on_state(attrs.get("/V")))
    if on_skip:
        on_skip(name, ft or "Unknown")
    return None


def _walk_fields(nodes: Any, parent_name: str, inherited: Dict[str, Any], out: List[RawWidget],
                 seen: set, on_skip: Optional[SkipCallback]):
    for ref in nodes or []:
        key = getattr(ref, "idnum", None)
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        node = _resolve(ref)
        partial = _as_text(node.get("/T"))
        if parent_name and partial:
            name = f"{parent_name}.{partial}"
        else:
            name = partial or parent_name

        attrs = dict(inherited)
        for attr in INHERITABLE_KEYS:
            if attr in node:
                attrs[attr] = node[attr]

        kids = _resolve(node.get("/Kids")) or []
        named_kids = [k for k in kids if "/T" in _resolve(k)]
        if named_kids:
            _walk_fields(named_kids, name, attrs, out, seen, on_skip)
            continue
        if not name:
            continue
        widget = _to_widget(name, attrs, node, on_skip)
        if widget is not None:
            out.append(widget)


def read_widgets_pypdf(pdf_bytes: bytes, on_skip: Optional[SkipCallback] = None) -> List[RawWidget]:
    """Read terminal AcroForm fields in /AcroForm /Fields order.

    A PDF without an /AcroForm dictionary yields an empty list; only unreadable,
    non-PDF or encrypted buffers raise.
    """
    _check_header(pdf_bytes)
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
    except Exception as e:
        raise DocumentLoadError(f"Failed to read PDF bytes: {e}") from e
    if getattr(reader, "is_encrypted", False):
        raise EncryptedPDFError("Encrypted PDF not supported")

    try:
        root = _resolve(reader.trailer.get("/Root"))
    except Exception as e:
        raise DocumentLoadError(f"PDF structure unreadable: {e}") from e
    if root is None:
        raise DocumentLoadError("PDF structure unreadable (no /Root)")

    acro = _resolve(root.get("/AcroForm"))
    if acro is None:
        return []

    widgets: List[RawWidget] = []
    _walk_fields(_resolve(acro.get("/Fields")) or [], "", {}, widgets, set(), on_skip)
    return widgets


def read_widgets_pymupdf(pdf_bytes: bytes, on_skip: Optional[SkipCallback] = None) -> List[RawWidget]:
    """Read widgets page by page with PyMuPDF, merging same-named radio buttons."""
    import fitz  # PyMuPDF

    _check_header(pdf_bytes)
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise DocumentLoadError(f"Failed to read PDF bytes: {e}") from e
    if doc.needs_pass:
        doc.close()
        raise EncryptedPDFError("Encrypted PDF not supported")

    # name -> {"kind", "value", "options"}; dicts keep first-seen order
    collected: Dict[str, Dict[str, Any]] = {}
    try:
        for page in doc:
            for w in page.widgets() or []:
                name = w.field_name
                if not name:
                    continue
                if w.field_type == fitz.PDF_WIDGET_TYPE_RADIOBUTTON:
                    entry = collected.setdefault(name, {"kind": "radio-group", "value": None, "options": []})
                    state = w.on_state()
                    state = _as_text(state) if state not in (None, True, False) else None
                    if state and state not in entry["options"]:
                        entry["options"].append(state)
                    if w.field_value not in (None, False, "", OFF_STATE):
                        entry["value"] = state if w.field_value is True else _as_text(w.field_value)
                    continue
                if name in collected:
                    continue
                if w.field_type == fitz.PDF_WIDGET_TYPE_TEXT:
                    kind = "multiline-text" if (w.field_flags or 0) & FF_MULTILINE else "text"
                    collected[name] = {"kind": kind, "value": w.field_value or None, "options": None}
                elif w.field_type in (fitz.PDF_WIDGET_TYPE_COMBOBOX, fitz.PDF_WIDGET_TYPE_LISTBOX):
                    options = []
                    for choice in w.choice_values or []:
                        if isinstance(choice, (list, tuple)):
                            choice = choice[1] if len(choice) > 1 else choice[0]
                        options.append(str(choice))
                    collected[name] = {"kind": "dropdown", "value": w.field_value or None, "options": options}
                elif w.field_type == fitz.PDF_WIDGET_TYPE_CHECKBOX:
                    value = w.field_value
                    if value is True:
                        value = _as_text(w.on_state()) or "Yes"
                    elif value in (None, False, "", OFF_STATE):
                        value = None
                    collected[name] = {"kind": "checkbox", "value": _as_text(value), "options": None}
                elif on_skip:
                    on_skip(name, str(w.field_type_string))
    finally:
        doc.close()

    return [
        RawWidget(
            name=name,
            kind=entry["kind"],
            value=entry["value"],
            options=tuple(entry["options"]) if entry["options"] is not None else None,
        )
        for name, entry in collected.items()
    ]


BACKENDS = {
    "pypdf": read_widgets_pypdf,
    "pymupdf": read_widgets_pymupdf,
}


def read_widgets(pdf_bytes: bytes, backend: str = DEFAULT_BACKEND,
                 on_skip: Optional[SkipCallback] = None) -> List[RawWidget]:
    try:
        reader = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown extraction backend: {backend!r}") from None
    return reader(pdf_bytes, on_skip=on_skip)
