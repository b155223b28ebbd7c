"""In-page text extraction shared by both backends.

Walks ``document.body`` depth-first. Text nodes are kept verbatim; links with a
usable href render as ``text [href]``; links without one render as their text.
The expression evaluates to a string and has no side effects.
"""

from __future__ import annotations

PAGE_CONTENT_SCRIPT = """(function () {
  function isUsableLink(anchor) {
    var raw = (anchor.getAttribute('href') || '').trim();
    if (!anchor.href || !raw) return false;
    if (raw.charAt(0) === '#') return false;
    if (raw.toLowerCase().indexOf('javascript:') === 0) return false;
    return true;
  }
  function extract(element) {
    var out = '';
    var nodes = element.childNodes;
    for (var i = 0; i < nodes.length; i++) {
      var node = nodes[i];
      if (node.nodeType === Node.TEXT_NODE) {
        out += node.textContent;
      } else if (node.nodeType === Node.ELEMENT_NODE) {
        if (node.tagName === 'A') {
          var text = node.textContent.trim();
          if (isUsableLink(node)) {
            out += text + ' [' + node.href + ']';
          } else if (text) {
            out += text;
          }
        } else {
          out += extract(node);
        }
      }
    }
    return out;
  }
  return document.body ? extract(document.body) : '';
})()"""

__all__ = ["PAGE_CONTENT_SCRIPT"]
