CSS_LOG = """
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    color: #1e293b;
    background: #f8fafc;
}
.content { max-width: 1100px; margin: 0 auto; padding: 1em 2em; }
.section { border-top: 1px solid #cbd5e1; margin-top: 1.5em; padding-top: 0.5em; }
.subsection h4 { color: #475569; margin: 1em 0 0.25em 0; }
.info { margin: 0.25em 0; }
.warning { color: #b45309; margin: 0.25em 0; }
.error { color: #b91c1c; font-weight: 600; margin: 0.25em 0; }
.debug { color: #64748b; font-size: 0.85em; margin: 0.25em 0; }
.result { background: #e0f2fe; padding: 0.25em 0.5em; margin: 0.5em 0; }
.matrix-container { margin: 1em 0; overflow-x: auto; }
.matrix-container pre { font-size: 0.8em; line-height: 1.2; }
.matrix-toggle .toggle-button { margin-right: 0.25em; }
.matrix-toggle .toggle-button.active { font-weight: 600; }
table.matrix-table td { text-align: right; padding: 2px 6px; }
table.matrix-table td.missing { color: #94a3b8; }
"""

MATRIX_TOGGLE_JS = """
<script>
document.addEventListener('DOMContentLoaded', function() {
    const toggleButtons = document.querySelectorAll('.matrix-toggle .toggle-button');
    toggleButtons.forEach(button => {
        button.addEventListener('click', function() {
            const matrixContainer = this.closest('.matrix-container');
            if (!matrixContainer) return;
            const viewType = this.getAttribute('data-view');
            matrixContainer.querySelectorAll('.toggle-button').forEach(btn => btn.classList.remove('active'));
            this.classList.add('active');
            matrixContainer.querySelectorAll('.matrix-view').forEach(view => view.style.display = 'none');
            const selectedView = matrixContainer.querySelector('.' + viewType + '-view');
            if (selectedView) {
                selectedView.style.display = 'block';
            }
        });
    });
});
</script>
"""
