"""
Scripts executed through `BrowserDriver.execute_script()`.

Every script is a function body and reads its inputs from `arguments`;
values are never interpolated into the source.
"""
# @file purpose: Injected JavaScript used by the Browser facade.

# Installs window.__browserCommands.contains(selector, text): elements
# matching `selector` whose text contains `text` (case-sensitive).
QUERY_HELPER = """
if (!window.__browserCommands) {
    window.__browserCommands = {
        contains: function (selector, text) {
            return Array.prototype.filter.call(
                document.querySelectorAll(selector),
                function (el) { return (el.textContent || '').indexOf(text) !== -1; }
            );
        }
    };
}
"""

CLICK_FIRST_CONTAINING = """
var matches = window.__browserCommands.contains(arguments[0], arguments[1]);
if (!matches.length) { return false; }
matches[0].click();
return true;
"""

SET_VALUE = """
var el = document.querySelector(arguments[0]);
if (!el) { return false; }
el.value = arguments[1];
return true;
"""

TINYMCE_SET_CONTENT = "tinyMCE.get(arguments[0]).setContent(arguments[1]);"

SELECT2_RESULTS_LIST = ".select2-results__options"
SELECT2_RESULTS = ".select2-results__options .select2-results__option"
SELECT2_HIGHLIGHTED = ".select2-results__option--highlighted"
SELECT2_SEARCH_FIELD = ".select2-container .select2-search__field"

SELECT2_HIGHLIGHT_RANDOM = """
var options = document.querySelectorAll('.select2-results__options .select2-results__option');
var current = document.querySelector(
  '.select2-results__options .select2-results__option--highlighted');
if (current) { current.classList.remove('select2-results__option--highlighted'); }
var picked = options[Math.floor(Math.random() * options.length)];
picked.classList.add('select2-results__option--highlighted');
"""
