from string import Template
from typing import Iterable

DEFAULT_LANG = 'ar'
DEFAULT_DIR = 'rtl'

STYLESHEET = """
@import url('https://fonts.googleapis.com/css2?family=Outfit:wght@400;600&display=swap');
body {
    margin: 0; padding: 40px; font-family: 'Outfit', sans-serif;
    background: #0f172a; color: #f8fafc;
    display: flex; flex-direction: column; align-items: center; min-height: 100vh;
    overflow-x: hidden;
}
.moe-row { display: flex; gap: 20px; width: 100%; max-width: 1000px; margin-bottom: 20px; flex-wrap: wrap; }
.moe-col { flex: 1; min-width: 250px; display: flex; flex-direction: column; gap: 15px; }
.moe-card {
    background: #1e293b; border: 1px solid #334155;
    padding: 30px; border-radius: 20px;
    box-shadow: 0 10px 25px rgba(0,0,0,0.2);
    width: 100%; transition: 0.3s;
}
.moe-card:hover { transform: translateY(-5px); border-color: #007acc; }
h1 { font-size: 3rem; color: #38bdf8; margin: 0 0 10px 0; }
p { color: #94a3b8; line-height: 1.6; }
button {
    background: #38bdf8; color: #0f172a;
    border: none; padding: 12px 25px; border-radius: 12px;
    font-weight: 600; cursor: pointer; transition: 0.2s;
    width: fit-content; margin-top: 10px;
}
button:hover { background: #7dd3fc; transform: scale(1.05); }
button:active { transform: scale(0.95); }
.moe-element { transition: 0.3s; }
* { box-sizing: border-box; }
"""

DOCUMENT = Template("""<!DOCTYPE html>
<html lang="$lang" dir="$dir">
<head>
<meta charset="UTF-8">
<style>$stylesheet</style>
</head>
<body>
$body
<script>
(function() {
try { $script } catch(e) { console.error('Moe Script Error:', e); }
})();
</script>
</body>
</html>
""")


def wrap_in_boilerplate(body: str, scripts: Iterable[str],
                        lang: str = DEFAULT_LANG, direction: str = DEFAULT_DIR) -> str:
    """
    Builds the final HTML document around the compiled body.

    All script statements run in order inside a single try block, so the
    first runtime error is logged and skips the statements after it.
    """
    return DOCUMENT.substitute(
        lang=lang,
        dir=direction,
        stylesheet=STYLESHEET,
        body=body,
        script='\n'.join(scripts),
    )
