# xuul

An HTTP API service that puts a set of lookup endpoints behind one uniform
JSON envelope: hashing, trending searches from several sites, weather
forecasts, website metadata, daily news, QR codes and more. A second set of
endpoints lists API entries and friend links stored in PostgreSQL. Redis is
used as a cache.

## Installation

```
pip install .
```

The database URL uses SQLAlchemy's `postgresql://` scheme, whose default
driver (psycopg2) is not installed with the package; install it alongside.

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from the environment. On start, a `.env` file found from
the current directory upward is loaded first. Then, depending on `DEBUG`,
`env.development` (`DEBUG=true`) or `env.production` is loaded as well;
variables already set are not overridden.

| Variable | Purpose |
| --- | --- |
| `DEBUG` | required; `true` logs to the console, anything else logs to `logs/server.log`, rotated at midnight |
| `LOG_LEVEL` | log level name, `ERROR` when unset |
| `SERVER_HOST` | required; address to listen on |
| `SERVER_PORT` | port to listen on (default `3000`) |
| `DB_HOST`, `DB_PORT`, `DB_USERNAME`, `DB_PASSWORD`, `DB_DATABASE` | required; PostgreSQL connection |
| `REDIS_HOST`, `REDIS_PASSWORD`, `REDIS_db` | Redis connection, built as `redis://:<password>@<host>/<db>` |

If a required variable is missing, or `DB_PORT` is not a valid port, the
command prints the problem and exits with status 1.

An example `env.development`:

```
DEBUG=true
SERVER_HOST=127.0.0.1
SERVER_PORT=3000
DB_HOST=localhost
DB_PORT=5432
DB_USERNAME=user
DB_PASSWORD=password
DB_DATABASE=xuul
REDIS_HOST=localhost:6379
REDIS_PASSWORD=password
REDIS_db=0
```

## Running

```
xuul
```

The server listens on `SERVER_HOST:SERVER_PORT`. `--host` and `--port`
override them. The database pool, HTTP client and Redis connection are
opened at startup and closed at shutdown. CORS is open to every origin,
method and header.

## Endpoints

`GET /api` answers with the plain text `Hello xuul!`. The service endpoints
live under `/api` and answer with an envelope such as

```json
{"code": 200, "message": "OK", "data": {"title": "...", "...": "..."}}
```

Errors carry `code`, `message` (the HTTP reason phrase) and `detail` instead
of `data`. Missing or malformed query parameters give 400, malformed path
parameters 422, missing data 404 and upstream failures 500.

| Path | Parameters |
| --- | --- |
| `/api/bing` | — |
| `/api/fanyi` | `text` |
| `/api/changya` | — |
| `/api/cos` | `cos_image=true` or `cos_video=true` (exactly one); a random row from the cosplay tables |
| `/api/yiyan` | — (always answers 400, under maintenance) |
| `/api/everyday_60s` | — ; tries three mirrors for today's digest, 404 if none answers |
| `/api/hot_search` | `q`: douyin, kuaishou, toutiao, baidu, weibo, bilibili, or 抖音, 快手, 头条, 百度, 微博, b站, 哔哩哔哩 (case-insensitive); others give 500 |
| `/api/qrcode` | `q`, optional `color` (`FF6B6B`), `bgcolor` (`F4F4F4`), `size` (`400`); returns a JPEG image |
| `/api/ys_kaci` | — |
| `/api/website_info` | `url` |
| `/api/ip` | optional `ip`, otherwise the `X-Forwarded-For` header |
| `/api/encryption` | `md5`, `sha256`, `sha384` or `sha512`; the first given, in that order, is hashed |
| `/api/mishe_cos` | `top`, `new` or `posts` set to `true`, checked in that order |
| `/api/weather` | `q`: a region name; 404 if it is unknown |

Endpoints under `/api/v1`:

| Path | Description |
| --- | --- |
| `/api/v1/api-list` | every API entry, ordered by id |
| `/api/v1/api-list/search?q=...` | entries whose name, path or introduction contains `q`; an empty `q` gives `[]` |
| `/api/v1/api-list/{id}` | one entry, or an empty 404 |
| `/api/v1/friend-links` | approved friend links, ordered by id |

## Using it as a library

The parsing and formatting helpers work without any server:

```python
from xuul.hashing import encryption
from xuul.hot_search import round_to_str
from xuul.weather import remove_suffix

encryption(md5="hello").to_dict()   # {"code": 200, "message": "OK", "data": {...}}
round_to_str(123456)                # "12 万"
remove_suffix("北京市")              # "北京"
```

Other pure helpers include `xuul.hot_search.parse_douyin` and its siblings,
`xuul.weather.parse_weather`, `xuul.website_info.extract_page_info`,
`xuul.endpoints.parse_changya`, `parse_mishe_posts` and `parse_gacha_pools`.

`xuul.app.create_app(state)` builds the FastAPI application around a given
`xuul.state.AppState` (for example one from `xuul.state.create_state()`);
called with no state, the application creates its own at startup.

## What it does not do

The package reads the `apilist`, `friend_links`, `data_cos_image` and
`data_cos_video` tables but never creates or migrates them, and has no
endpoints for adding or changing rows; the schema and data must be put in
place by other means.