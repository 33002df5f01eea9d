"""
Argosy flatteners: turn raw argv-like tokens into atomic tokens.

A flattener is any callable with the signature

    flatten(options, arguments, stop) -> list[str]

where `options` is the registry, `arguments` the raw tokens and `stop` the
stop-at-first-positional flag given to the resolver. The resolver only ever
consumes the returned list, so strategies are freely swappable.

Strategies
- basic: tokens pass through untouched.
- gnu: splits '--name=value' / '-name=value' and '-fVALUE' for registered,
  value-taking options.
- posix: splits '--name=value' and bursts short clusters ('-abc' → '-a -b -c',
  '-fVALUE' → '-f VALUE'). In stop mode, the first non-option token is
  preceded by '--' so the resolver treats everything after it as positional.
"""
import re

# shape: <name>[=<value>] where <name> is a shell-style option spelling
_ASSIGNMENT = r"(?P<input>--?[^\W\d_](-?[^\W_]+)*)=(?P<value>[^\r\n]*)"


def _assignment(options, token):
    """
    split '--name=value' into ['--name', 'value'] when '--name' is a registered
    value-taking option; otherwise return None.
    """
    if not (match := re.fullmatch(_ASSIGNMENT, token)):
        return None
    option = options.lookup(match["input"])
    if option is None or not option.takes:
        return None
    return [match["input"], match["value"]]


def basic(options, arguments, stop):
    """
    identity strategy: every token is already atomic.
    """
    return list(arguments)


def gnu(options, arguments, stop):
    """
    gnu-style flattening.

    - '--' and everything after it pass unchanged.
    - registered spellings pass unchanged.
    - '--name=value' / '-name=value' split when the name takes values.
    - '-fVALUE' splits when '-f' takes values.
    - an unrecognized dashed token passes unchanged; in stop mode it and every
      later token pass unchanged too.
    """
    tokens = []
    arguments = list(arguments)

    for index, token in enumerate(arguments):
        if token == "--":
            tokens.extend(arguments[index:])
            break

        if token == "-" or not token.startswith("-") or options.lookup(token) is not None:
            tokens.append(token)
            continue

        if split := _assignment(options, token):
            tokens.extend(split)
            continue

        if (option := options.lookup(token[:2])) is not None and option.takes:
            tokens.extend((token[:2], token[2:]))
            continue

        if stop:
            tokens.extend(arguments[index:])
            break
        tokens.append(token)

    return tokens


def posix(options, arguments, stop):
    """
    posix-style flattening.

    - '--' and everything after it pass unchanged.
    - '--name=value' splits when '--name' takes values.
    - '-abc' bursts into '-a', '-b', '-c' for registered short spellings; once a
      value-taking option is reached, the rest of the cluster is its value.
    - in stop mode, the first token that is not an option gets a '--' inserted
      before it, so it and all later tokens become positional. Tokens the last
      value-taking option is still waiting for are its values, not a stop.
    """
    tokens = []
    arguments = list(arguments)
    # last emitted option still waiting for values, and how many it has
    pending, taken = None, 0

    def eat(index):
        tokens.append("--")
        tokens.extend(arguments[index:])

    def wait(option):
        nonlocal pending, taken
        pending, taken = (option if option is not None and option.takes else None), 0

    def take(token):
        nonlocal pending, taken
        taken += 1
        if pending is not None and pending.limit is not None and taken >= pending.limit:
            pending = None
        tokens.append(token)

    for index, token in enumerate(arguments):
        if token == "--":
            tokens.extend(arguments[index:])
            break

        if token == "-":
            take(token)
            continue

        if not token.startswith("-"):
            if stop and pending is None:
                eat(index)
                break
            take(token)
            continue

        if (option := options.lookup(token)) is not None:
            wait(option)
            tokens.append(token)
            continue

        if split := _assignment(options, token):
            wait(None)
            tokens.extend(split)
            continue

        burst, last = [], None
        if not token.startswith("--"):
            for position, char in enumerate(token[1:], start=1):
                if (last := options.lookup("-" + char)) is None:
                    burst = None
                    break
                burst.append("-" + char)
                if last.takes:
                    if position + 1 < len(token):
                        burst.append(token[position + 1:])
                        last = None
                    break

        if burst:
            wait(last)
            tokens.extend(burst)
        elif pending is not None:
            # unregistered dashed tokens are values of the waiting option
            take(token)
        elif stop:
            eat(index)
            break
        else:
            tokens.append(token)

    return tokens


__all__ = (
    "basic",
    "gnu",
    "posix",
)
