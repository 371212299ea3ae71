# canzone

Building blocks for a networked music player:

- **Playback configuration** (`canzone.playback.config`): bitrates, sample
  formats, normalisation settings and volume control curves, parsed from the
  same strings a command line would accept.
- **Audio sinks** (`canzone.playback.sinks`): write raw sample bytes to
  standard output, to a file, or into the standard input of another program.
- **Metadata models** (`canzone.metadata`): plain data classes for artists,
  albums, tracks, episodes, shows, playlists, lyrics and the availability rules
  that decide whether an item may be played.
- **Zeroconf discovery endpoint** (`canzone.discovery`): an HTTP server that
  answers `getInfo` and `addUser` requests from clients on the local network
  and hands over the decrypted login it receives.

## Playback configuration

```python
from canzone.playback.config import AudioFormat, Bitrate, PlayerConfig, VolumeCtrl

fmt = AudioFormat.parse("s24_3")     # case-insensitive
fmt.size()                           # bytes per sample -> 3
Bitrate.parse("320")                 # Bitrate.BITRATE_320
VolumeCtrl.parse("log", 60.0)        # VolumeCtrl(kind=VolumeCtrlKind.LOG, db_range=60.0)

config = PlayerConfig()              # gapless on, normalisation off, 160 kbit/s
```

`NormalisationType.parse` and `NormalisationMethod.parse` work the same way.
Unknown names raise `ValueError`.

## Sinks

```python
from canzone.playback.config import AudioFormat
from canzone.playback.sinks import StdoutSink, SubprocessSink, find

sink = StdoutSink("out.raw", AudioFormat.S16)
sink.start()
sink.write(b"\x00\x00" * 1024)
sink.stop()

with SubprocessSink("aplay -f cd", AudioFormat.S16) as player:
    player.write(b"\x00\x00" * 1024)
```

A sink used as a context manager is started on entry and stopped on exit.
`StdoutSink(None, ...)` writes to standard output. `SubprocessSink` splits its
command with shell quoting rules, pipes the bytes into the program's standard
input, restarts the program once per write if writing fails, and kills it on
`stop()`. Passing `"?"` as the file or command prints a usage note and exits.

`find(name)` returns the sink class registered under `"pipe"` or
`"subprocess"`, the default (`"pipe"`) for `None`, and `None` for an unknown
name. Failures raise a subclass of `SinkError`: `SinkNotConnected`,
`SinkConnectionRefused`, `SinkWriteError`, `SinkInvalidParams` or
`SinkStateChange`.

## Metadata

Messages are taken as mappings of field name to value; missing fields take
their defaults. Models are built with a class method:

- `from_message(msg)` on `Artist`, `Album`, `Disc`, `Track`, `Episode`, `Show`,
  `Availability`, `Restriction`, `SalePeriod`, `Image`, `Copyright` and the
  playlist models;
- `Playlist.from_message(msg, playlist_id)`, since the message carries no id;
- `AudioFiles.from_messages(messages)`, which skips files with no format;
- `Lyrics.from_json(data)`, which raises `ValueError` on a malformed document.

```python
from canzone.metadata.lyrics import Lyrics

lyrics = Lyrics.from_json(payload_bytes)
for line in lyrics.lyrics.lines:
    print(line.start_time_ms, line.words)
```

`canzone.metadata.audio_item.AudioItem.from_track` and `from_episode` turn a
`Track` or `Episode` into a playable `AudioItem`: covers sorted widest first
with `{file_id}` filled into the image URL, embargo and country restrictions
checked against a `UserData`, and `availability` set to `None` or an
`UnavailabilityReason`. A non-positive duration raises `InvalidDuration`; an
explicit item with `filter_explicit=True` raises `ExplicitContentFiltered`.

`canzone.metadata.request` has `metrics_uri(uri, country, product)` to build a
request URI and `first_payload(payload)`, which raises `EmptyResponse` when a
response has no parts.

## Discovery

```python
from canzone.discovery import DiscoveryConfig, DiscoveryServer

config = DiscoveryConfig(device_id="example-device", client_id="example-client")
server = DiscoveryServer(config, keys, 0)
await server.start()          # server.port now holds the bound port
async for login in server:    # a ReceivedLogin(username, blob, device_id) per addUser
    ...
await server.close()
```

`keys` is any object with `public_key() -> bytes` and
`shared_secret(remote_key) -> bytes`. `decrypt_blob(encrypted_blob, shared_key)`
checks and decrypts a login blob on its own; it returns `None` on a checksum
mismatch.

## What it does not do

- It does not connect to a streaming service, fetch metadata or audio, or
  decode audio; the models are filled from messages you supply.
- The discovery server does not advertise itself over mDNS/DNS-SD, and the
  package does not generate the Diffie-Hellman keys it needs.
- There is no command-line program.

Install the `test` extra to run the test suite with pytest.