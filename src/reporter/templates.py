"""HTML templates for the review page. Placeholders are ``{name}``."""

BUTTON_TEMPLATE = '<button class="tab {activate}" data-target-id="{path}">{path}</button>'

OBSCURE_WARNING_TEMPLATE = (
    '<div class="obscure-warning">&#9888; Some diffs may not be visible due to trigger events. '
    'Review diffs in results folder.</div>'
)

SWITCHER_TEMPLATE = '''
    <section class="switcher {activate}" id="{path}">
      <div class="switcher-header">
        <h2>{path}</h2>
        <div class="toggle">
          <button class="toggle-btn active" data-show="new">New</button>
          <button class="toggle-btn" data-show="reference">Reference</button>
        </div>
      </div>
      {obscure_warning}
      <div class="frames">
        <img class="frame new visible" src="{new}" alt="{path} new capture" loading="lazy"/>
        <img class="frame reference" src="{reference}" alt="{path} reference" loading="lazy"/>
      </div>
    </section>'''

PAGE_TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>
  :root { --bg: #f8fafc; --card: white; --border: #e2e8f0; --text: #1e293b; --muted: #64748b; --accent: #6366f1; --warn: #92400e; }
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: var(--bg); color: var(--text); line-height: 1.6; padding: 1.5rem; }
  .container { max-width: 1400px; margin: 0 auto; }
  h1 { font-size: 1.8rem; margin-bottom: 0.3rem; }
  .meta { color: var(--muted); margin-bottom: 1.5rem; font-size: 0.9rem; }
  .tabs { display: flex; gap: 0.5rem; margin-bottom: 1rem; flex-wrap: wrap; }
  .tab { padding: 0.3rem 0.8rem; border-radius: 6px; border: 1px solid var(--border); background: var(--card); cursor: pointer; font-size: 0.82rem; }
  .tab.active { background: var(--accent); color: white; border-color: var(--accent); }
  .switcher { display: none; background: var(--card); border-radius: 8px; padding: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); }
  .switcher.active { display: block; }
  .switcher-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 0.8rem; }
  .switcher-header h2 { font-size: 1rem; }
  .toggle-btn { padding: 0.2rem 0.7rem; border-radius: 6px; border: 1px solid var(--border); background: var(--card); cursor: pointer; font-size: 0.8rem; }
  .toggle-btn.active { background: var(--text); color: white; }
  .obscure-warning { background: #fefce8; border: 1px solid #fde68a; color: var(--warn); border-radius: 6px; padding: 0.6rem 0.8rem; margin-bottom: 0.8rem; font-size: 0.88rem; }
  .frame { display: none; width: 100%; border: 1px solid var(--border); border-radius: 6px; }
  .frame.visible { display: block; }
</style>
</head>
<body>
<div class="container">
  <h1>{title}</h1>
  <p class="meta">{summary}</p>
  <nav class="tabs">{tabs}</nav>
  <main>{switchers}
  </main>
</div>
<script>
document.querySelectorAll('.tab').forEach(tab => {
  tab.addEventListener('click', () => {
    document.querySelectorAll('.tab').forEach(t => t.classList.remove('active'));
    document.querySelectorAll('.switcher').forEach(s => s.classList.remove('active'));
    tab.classList.add('active');
    document.getElementById(tab.dataset.targetId).classList.add('active');
  });
});
document.querySelectorAll('.switcher').forEach(panel => {
  panel.querySelectorAll('.toggle-btn').forEach(btn => {
    btn.addEventListener('click', () => {
      panel.querySelectorAll('.toggle-btn').forEach(b => b.classList.remove('active'));
      panel.querySelectorAll('.frame').forEach(f => f.classList.remove('visible'));
      btn.classList.add('active');
      panel.querySelector('.frame.' + btn.dataset.show).classList.add('visible');
    });
  });
});
</script>
</body>
</html>'''
