"""Single-page player served at /.

The page holds no session state of its own: it renders /api/state and
forwards every interaction (position samples, seeks, edits, copies, reset)
to the JSON API. Position samples go through a promise queue so they reach
the server in the order the video emitted them.
"""

PLAYER_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>ReelSub AI</title>
<style>
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { background: #0f172a; color: #e2e8f0; font-family: system-ui, sans-serif; }
  header { display: flex; justify-content: space-between; align-items: center;
    padding: 16px 24px; border-bottom: 1px solid #1e293b; }
  header h1 { font-size: 1.2rem; }
  header h1 span { color: #818cf8; }
  button { cursor: pointer; font: inherit; color: inherit; background: #1e293b;
    border: 1px solid #334155; border-radius: 8px; padding: 6px 14px; }
  button:hover { background: #334155; }
  main { max-width: 1280px; margin: 0 auto; padding: 24px; }
  .hidden { display: none !important; }
  #upload { border: 2px dashed #6366f1; border-radius: 12px; padding: 48px;
    text-align: center; cursor: pointer; max-width: 720px; margin: 48px auto; }
  #upload:hover { background: rgba(99,102,241,0.05); }
  #upload p { color: #94a3b8; margin-top: 8px; }
  #busy, #failed { text-align: center; padding: 80px 0; }
  .spinner { width: 64px; height: 64px; margin: 0 auto 24px; border-radius: 50%;
    border: 4px solid rgba(99,102,241,0.2); border-top-color: #6366f1;
    animation: spin 1s linear infinite; }
  @keyframes spin { to { transform: rotate(360deg); } }
  #failed p { color: #94a3b8; margin: 12px 0 24px; }
  #ready { display: grid; grid-template-columns: 2fr 1fr; gap: 24px; height: calc(100vh - 140px); }
  .stage { position: relative; background: #000; border-radius: 16px; overflow: hidden;
    display: flex; flex-direction: column; }
  .stage video { flex: 1; max-width: 100%; max-height: calc(100% - 48px); margin: auto; }
  #overlay { position: absolute; bottom: 80px; left: 0; right: 0; text-align: center;
    pointer-events: none; }
  #overlay span { background: rgba(0,0,0,0.8); padding: 10px 20px; border-radius: 12px;
    font-size: 1.3rem; font-weight: 700; }
  .bar { display: flex; justify-content: space-between; padding: 12px 20px;
    background: #0f172a; border-top: 1px solid #1e293b; font-size: 0.8rem; color: #64748b; }
  #clock { font-family: monospace; color: #818cf8; }
  .list { display: flex; flex-direction: column; border: 1px solid #1e293b; border-radius: 16px;
    overflow: hidden; }
  .list-head { display: flex; justify-content: space-between; padding: 16px;
    border-bottom: 1px solid #1e293b; }
  #captions { flex: 1; overflow-y: auto; padding: 12px; }
  .item { padding: 12px; border-radius: 8px; border-left: 4px solid transparent;
    background: rgba(30,41,59,0.4); margin-bottom: 10px; cursor: pointer; }
  .item.active { border-left-color: #6366f1; background: rgba(99,102,241,0.1); }
  .item .meta { display: flex; justify-content: space-between; align-items: center; }
  .item .range { font-family: monospace; font-size: 0.75rem; color: #94a3b8; }
  .item .text { margin: 8px 0; cursor: text; }
  .item input { width: 100%; background: #0f172a; color: #fff; border: 1px solid #6366f1;
    border-radius: 4px; padding: 4px; font: inherit; }
  .badge { font-size: 0.65rem; padding: 2px 6px; border-radius: 4px; }
  .badge.good { background: rgba(34,197,94,0.2); color: #4ade80; }
  .badge.warn { background: rgba(234,179,8,0.2); color: #facc15; }
  .badge.long { background: rgba(239,68,68,0.2); color: #f87171; }
  .list-foot { padding: 10px; text-align: center; font-size: 0.65rem; color: #64748b;
    border-top: 1px solid #1e293b; text-transform: uppercase; }
  #toast { position: fixed; bottom: 32px; left: 50%; transform: translateX(-50%);
    background: #4f46e5; padding: 8px 24px; border-radius: 999px; font-weight: 600; }
</style>
</head>
<body>
<header>
  <h1>ReelSub <span>AI</span></h1>
  <div>
    <a id="export" class="hidden" href="/captions.vtt" download="captions.vtt"><button>Export VTT</button></a>
    <button id="reset" class="hidden">Start New Project</button>
  </div>
</header>
<main>
  <div id="upload">
    <input id="picker" type="file" accept="video/mp4,video/quicktime" hidden>
    <h3>Upload Reels Video</h3>
    <p>Drag &amp; drop MP4 or MOV files here, or click to browse.</p>
  </div>

  <div id="busy" class="hidden">
    <div class="spinner"></div>
    <h3 id="busy-title">AI is transcribing...</h3>
    <p>Analyzing bilingual context and segmenting lines...</p>
  </div>

  <div id="failed" class="hidden">
    <h3>Processing Error</h3>
    <p id="error"></p>
    <button id="retry">Try Again</button>
  </div>

  <div id="ready" class="hidden">
    <div class="stage">
      <video id="video" controls></video>
      <div id="overlay" class="hidden"><span></span></div>
      <div class="bar"><span id="clock">0:00.0</span><span>Preview Area</span></div>
    </div>
    <div class="list">
      <div class="list-head"><strong>Subtitles List</strong><span id="count"></span></div>
      <div id="captions"></div>
      <div class="list-foot">Click text to edit &bull; Click time to jump</div>
    </div>
  </div>
</main>
<div id="toast" class="hidden"></div>
<script>
  const $ = (id) => document.getElementById(id);
  const video = $('video');
  let state = null;
  let queue = Promise.resolve();
  let toastTimer = null;
  let pollTimer = null;
  let refreshSeq = 0;

  async function api(path, body, headers) {
    const init = { method: body === undefined ? 'GET' : 'POST', headers: headers || {} };
    if (body !== undefined) {
      init.body = body instanceof Blob ? body : JSON.stringify(body);
      if (!(body instanceof Blob)) init.headers['Content-Type'] = 'application/json';
    }
    const res = await fetch(path, init);
    const data = await res.json();
    if (!res.ok) throw new Error(data.error || res.statusText);
    return data;
  }

  function show(section) {
    for (const id of ['upload', 'busy', 'failed', 'ready']) {
      $(id).classList.toggle('hidden', id !== section);
    }
  }

  function render(next) {
    refreshSeq++;  // polls still in flight are now stale
    state = next;
    const phase = state.phase;
    $('reset').classList.toggle('hidden', phase !== 'ready');
    $('export').classList.toggle('hidden', phase !== 'ready');
    clearTimeout(pollTimer);
    if (phase === 'idle') {
      show('upload');
    } else if (phase === 'uploading' || phase === 'processing') {
      $('busy-title').textContent =
        phase === 'uploading' ? 'Uploading Media...' : 'AI is transcribing...';
      show('busy');
      pollTimer = setTimeout(refresh, 1000);
    } else if (phase === 'error') {
      $('error').textContent = state.error;
      show('failed');
    } else {
      if (video.getAttribute('src') !== state.media_url) video.src = state.media_url;
      renderList();
      renderOverlay();
      show('ready');
    }
  }

  function renderList() {
    const list = $('captions');
    list.innerHTML = '';
    $('count').textContent = state.captions.length + ' segments';
    for (const cap of state.captions) {
      const item = document.createElement('div');
      item.className = 'item' + (cap.id === state.active_caption_id ? ' active' : '');
      item.id = cap.id;
      item.innerHTML =
        '<div class="meta"><span class="range"></span><button class="copy" title="Copy to clipboard">Copy</button></div>' +
        '<p class="text"></p><span class="badge"></span>';
      item.querySelector('.range').textContent = '[' + cap.range + ']';
      fillText(item, cap);
      item.addEventListener('click', () => seek(cap.id));
      item.querySelector('.copy').addEventListener('click', (e) => {
        e.stopPropagation();
        copy(cap.text);
      });
      item.querySelector('.text').addEventListener('click', (e) => {
        e.stopPropagation();
        beginEdit(item, cap);
      });
      list.appendChild(item);
    }
  }

  function fillText(item, cap) {
    item.querySelector('.text').textContent = cap.text;
    const badge = item.querySelector('.badge');
    badge.className = 'badge ' + cap.hint;
    badge.textContent = cap.chars + ' chars';
  }

  function renderOverlay() {
    const active = state.captions.find((c) => c.id === state.active_caption_id);
    $('overlay').classList.toggle('hidden', !active);
    if (active) $('overlay').querySelector('span').textContent = active.text;
  }

  function beginEdit(item, cap) {
    const p = item.querySelector('.text');
    const input = document.createElement('input');
    input.value = cap.text;
    let done = false;
    const commit = async () => {
      if (done) return;
      done = true;
      const updated = await api('/api/captions/' + encodeURIComponent(cap.id), { text: input.value });
      Object.assign(cap, updated);
      input.replaceWith(p);
      fillText(item, cap);
      renderOverlay();
    };
    input.addEventListener('blur', commit);
    input.addEventListener('keydown', (e) => { if (e.key === 'Enter') commit(); });
    input.addEventListener('click', (e) => e.stopPropagation());
    p.replaceWith(input);
    input.focus();
  }

  async function seek(id) {
    const res = await api('/api/seek', { id });
    video.currentTime = res.position;
    video.play();
  }

  async function copy(text) {
    try {
      await navigator.clipboard.writeText(text);
    } catch (e) {
      // best-effort
    }
    const res = await api('/api/copy', { text });
    const toast = $('toast');
    toast.textContent = res.notice;
    toast.classList.remove('hidden');
    clearTimeout(toastTimer);
    toastTimer = setTimeout(() => toast.classList.add('hidden'), res.duration * 1000);
  }

  function onTimeUpdate() {
    const position = video.currentTime;
    queue = queue.then(async () => {
      const res = await api('/api/position', { position });
      $('clock').textContent = res.clock;
      if (res.active_caption_id !== state.active_caption_id) {
        const prev = state.active_caption_id && $(state.active_caption_id);
        if (prev) prev.classList.remove('active');
        state.active_caption_id = res.active_caption_id;
        const el = res.active_caption_id && $(res.active_caption_id);
        if (el) el.classList.add('active');
        renderOverlay();
      }
      if (res.scroll) {
        const el = $(res.active_caption_id);
        if (el) el.scrollIntoView({ behavior: 'smooth', block: 'center' });
      }
    }).catch(() => {});
  }

  async function upload(file, source) {
    show('busy');
    $('busy-title').textContent = 'Uploading Media...';
    pollTimer = setTimeout(refresh, 1000);
    try {
      render(await api('/api/upload', file, {
        'Content-Type': file.type,
        'X-Source': source,
        'X-Filename': encodeURIComponent(file.name),
      }));
    } catch (e) {
      await refresh();
      if (state && state.phase === 'idle') alert(e.message);
    }
  }

  async function reset() {
    video.pause();
    video.removeAttribute('src');
    video.load();
    render(await api('/api/reset', {}));
  }

  async function refresh() {
    const seq = ++refreshSeq;
    const next = await api('/api/state');
    // Superseded, or the list is already rendered and may hold an open edit
    if (seq !== refreshSeq) return;
    if (state && state.phase === 'ready' && next.phase === 'ready') return;
    render(next);
  }

  $('upload').addEventListener('click', () => $('picker').click());
  $('picker').addEventListener('change', (e) => {
    if (e.target.files && e.target.files[0]) upload(e.target.files[0], 'picker');
  });
  $('upload').addEventListener('dragover', (e) => e.preventDefault());
  $('upload').addEventListener('drop', (e) => {
    e.preventDefault();
    const file = e.dataTransfer.files && e.dataTransfer.files[0];
    if (file && file.type.startsWith('video/')) upload(file, 'drop');
  });
  $('reset').addEventListener('click', reset);
  $('retry').addEventListener('click', reset);
  video.addEventListener('timeupdate', onTimeUpdate);
  refresh();
</script>
</body>
</html>
"""
