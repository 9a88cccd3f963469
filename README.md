# relaychat

The building blocks of a multi-agent chat harness. The harness passes one
conversation between several coding agents (Claude, GPT and Codex) and keeps
every turn on disk. relaychat has no dependencies outside the standard library.

## What it provides

### Conversation model (`relaychat.conversation`)

- `Agent`, `Role`, `TurnStatus`, `Turn`, `Sessions` and `Conversation`.
- `to_dict` / `from_dict` convert turns and conversations to and from JSON.
- `Turn.new_summary(content, count)` creates the system turn that stands in
  for compacted turns.
- `Conversation.last_assistant_turn()` returns the most recent assistant turn.

### Persistence (`relaychat.persist`)

`ConversationStore(root)` is enabled only when `root/config.toml` exists. When
it is disabled, `save` does nothing and `load` raises `StoreError`.

When enabled, `save` writes `conversation.json` and a human-readable
`transcript.md` to `<root>/conversations/<uuid>/`.

`load` reads a conversation back. If the file has an older schema version,
`load` migrates it with `migrate` and rewrites it on disk. `render_transcript`
produces the markdown transcript on its own.

### Print-mode helpers (`relaychat.print_mode`, `relaychat.print_events`)

- `parse_rotation("claude,codex,gpt")` returns a list of `Agent`s. It skips
  blank entries. It raises `ValueError` when an agent name is unknown or the
  list is empty.
- `PrintFormat.parse("json")` accepts `text` or `json`, in any case.
- `PrintEvent.turn_start`, `turn_end`, `error` and `done` build events.
  `to_json()` turns an event into one NDJSON line tagged with `type`.

### Slash commands (`relaychat.slash`)

`parse("/handoff gpt")` returns a `ParsedCommand`. It returns `None` when the
line is not a command. `/?` is treated as `/help`.

`resolve` and `resolve_with_skills` look the command up in
`CommandRegistry.builtins()` and return a `SlashOutcome`. Both are pure and do
no IO. The built-in commands are:

- `help`, `hotkeys`, `new`, `resume`
- `compact`, `copy`, `export [path]`
- `handoff <agent>`, `focus <agent>`
- `skills`, `quit`

`resolve_with_skills` also looks up user skills. It accepts any object with a
`find(name)` method, and built-in commands always take precedence over skills.

### Session search (`relaychat.fuzzy`, `relaychat.sessions`, `relaychat.picker`)

- `fuzzy_score(query, text)` scores a subsequence match. A lower score is
  better. It returns `None` when there is no match.
- `load_session_entries(harness_dir)` lists saved conversations, newest first,
  and skips unreadable ones.
- `fuzzy_filter(entries, query)` ranks entries. Every whitespace-separated
  token must match.
- `derive_title`, `derive_agent_labels`, `truncate_chars` and `format_age`
  build the display fields.
- `PickerState` holds the query, the filtered list and the cursor. Row 0 is
  "new conversation". `select_current()` returns a `PickerOutcome`.

## Example

```python
from relaychat.conversation import Agent, Conversation, Role, Turn, TurnStatus
from relaychat.persist import ConversationStore
from relaychat.slash import CommandRegistry, parse, resolve

conv = Conversation.new(Agent.CLAUDE, True)
conv.append_turn(Turn(agent=Agent.CLAUDE, role=Role.USER,
                      content="refactor the worker", status=TurnStatus.COMPLETE))

store = ConversationStore(".agent-harness")
store.save(conv)  # does nothing unless .agent-harness/config.toml exists

outcome = resolve(parse("/focus codex"), CommandRegistry.builtins())
```

## What it does not do

relaychat is a library of data and logic only. It does not include:

- a command-line program or chat screen;
- anything that starts agent backends or drives a print-mode rotation. It only
  parses the rotation and format options and builds the output events;
- an interactive picker screen. `PickerState` is the state behind one;
- rendering markdown for the terminal.

## Running the tests

```
pip install -e ".[test]"
pytest
```