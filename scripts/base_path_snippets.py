"""Head and footer scripts that make a static build servable from any URL prefix."""

from __future__ import annotations

ADMIN = "admin"
SITE = "site"

BASE_PATH_GLOBAL = "window.__BASE_PATH__"

STYLESHEET_PATH = "/assets/css/main.css"
BUNDLE_PATH = "/assets/js/main.bundle.js"
ADMIN_SCRIPT_PATH = "/admin/preview-templates/index.js"

ADMIN_HEAD_FRAGMENT = f'<script type="module" src="{ADMIN_SCRIPT_PATH}"></script>'
SITE_HEAD_FRAGMENT = (
    f'<link rel="stylesheet" href="{STYLESHEET_PATH}">'
    f'<script async="async" src="{BUNDLE_PATH}"></script>'
)

CLOSING_TAGS = "</body></html>"

# Reads the root element attributes, resolves the mount prefix and publishes it.
RESOLVE_BASE_JS = (
    "var d=document;"
    'var attr=d.documentElement.getAttribute("data-base-path");'
    'var base="/";'
    'var knownAttr=d.documentElement.getAttribute("data-known-roots");'
    'var known=knownAttr?knownAttr.split(","):[];'
    'if(attr&&attr!=="auto"){base=attr;}'
    'else{var segments=location.pathname.split("/").filter(Boolean);'
    'if(segments.length&&known.indexOf(segments[0])===-1){base="/"+segments[0]+"/";}}'
    'if(base.slice(-1)!=="/"){base+="/";}'
    f"{BASE_PATH_GLOBAL}=base;"
)

ADMIN_BOOTSTRAP = (
    "<script>(function(){"
    + RESOLVE_BASE_JS
    + 'var script=d.createElement("script");'
    'script.type="module";'
    f'script.src=base+"{ADMIN_SCRIPT_PATH.lstrip("/")}";'
    "d.head.appendChild(script);"
    "}());</script>"
)

SITE_BOOTSTRAP = (
    "<script>(function(){"
    + RESOLVE_BASE_JS
    + 'var baseEl=d.createElement("base");baseEl.href=base;d.head.appendChild(baseEl);'
    'var link=d.createElement("link");link.rel="stylesheet";'
    f'link.href=base+"{STYLESHEET_PATH.lstrip("/")}";d.head.appendChild(link);'
    'var script=d.createElement("script");script.async=true;'
    f'script.src=base+"{BUNDLE_PATH.lstrip("/")}";d.head.appendChild(script);'
    "}());</script>"
    f'<noscript><link rel="stylesheet" href="{STYLESHEET_PATH}"></noscript>'
)

FOOTER_SCRIPT = (
    "<script>(function(){"
    f'var base={BASE_PATH_GLOBAL}||"/";'
    'if(base==="/"){return;}'
    'var normalized=base.replace(/\\/+$/,""),'
    "anchors=document.querySelectorAll(\"a[href^='/']\");"
    "for(var i=0;i<anchors.length;i++){"
    'var href=anchors[i].getAttribute("href");'
    'if(!href||href[0]!=="/"||href[1]==="/"){continue;}'
    'if(href==="/"){anchors[i].setAttribute("href",base);continue;}'
    'if(href[1]==="#"){anchors[i].setAttribute("href",base+href.slice(1));continue;}'
    'anchors[i].setAttribute("href",normalized+href);}'
    "var forms=document.querySelectorAll(\"form[action^='/']\");"
    "for(var j=0;j<forms.length;j++){"
    'var action=forms[j].getAttribute("action");'
    'if(!action||action[0]!=="/"||action[1]==="/"){continue;}'
    'if(action==="/"){forms[j].setAttribute("action",base);continue;}'
    'forms[j].setAttribute("action",normalized+action);}'
    "}());</script>"
)

# Footer written by earlier builds. Its trailing-slash regex came out as `///+$/`,
# which comments out the rest of the one-line script, so it is replaced.
LEGACY_FOOTER_SCRIPT = (
    r'''<script>(function(){var base=window.__BASE_PATH__||"/";if(base==="/"){return;}'''
    r'''var normalized=base.replace(///+$/,""),anchors=document.querySelectorAll("a[href^='/']");'''
    r'''for(var i=0;i<anchors.length;i++){var href=anchors[i].getAttribute("href");'''
    r'''if(!href||href[0]!=='/'||href[1]==='/'){continue;}'''
    r'''if(href==="/"){anchors[i].setAttribute("href",base);continue;}'''
    r'''if(href[1]==="#"){anchors[i].setAttribute("href",base+href.slice(1));continue;}'''
    r'''anchors[i].setAttribute("href",normalized+href);}'''
    r'''var forms=document.querySelectorAll("form[action^='/']");'''
    r'''for(var j=0;j<forms.length;j++){var action=forms[j].getAttribute("action");'''
    r'''if(!action||action[0]!=='/'||action[1]==='/'){continue;}'''
    r'''if(action==="/"){forms[j].setAttribute("action",base);continue;}'''
    r'''forms[j].setAttribute("action",normalized+action);} }());</script>'''
)

HEAD_REPLACEMENTS = {
    ADMIN: (ADMIN_HEAD_FRAGMENT, ADMIN_BOOTSTRAP),
    SITE: (SITE_HEAD_FRAGMENT, SITE_BOOTSTRAP),
}


def inject_bootstrap(html_text: str, kind: str) -> str:
    """Swap the static asset tags of ``kind`` for the runtime bootstrap.

    Documents that no longer carry the exact fragment (already patched, or
    built from different markup) come back untouched.
    """
    fragment, replacement = HEAD_REPLACEMENTS[kind]
    if fragment not in html_text:
        return html_text
    return html_text.replace(fragment, replacement, 1)


def inject_link_rewriter(html_text: str) -> tuple[str, bool]:
    """Return ``(html_text, missing_anchor)`` with the footer script appended once."""
    if FOOTER_SCRIPT in html_text:
        return html_text, False
    if LEGACY_FOOTER_SCRIPT in html_text:
        return html_text.replace(LEGACY_FOOTER_SCRIPT, FOOTER_SCRIPT), False
    if CLOSING_TAGS not in html_text:
        return html_text, True
    return html_text.replace(CLOSING_TAGS, f"{FOOTER_SCRIPT}{CLOSING_TAGS}", 1), False
