"""Notes — a small JSON API built from class-based views.

Demonstrates verb dispatch, automatic OPTIONS answers, 405s for
unimplemented verbs, a class-level error generator, and error
middleware that renders every forwarded error as JSON.

Inspect and run:
    perch routes app:app
    perch run app:app
"""

from perch import App, HTTPError, View, create_error

app = App()

notes: dict[int, str] = {}


def json_error(status: int) -> HTTPError:
    return create_error(status, "This endpoint is read-only")


class NoteList(View):
    def get(self, request, response, next):
        response.json([{"id": key, "text": value} for key, value in sorted(notes.items())])

    async def post(self, request, response, next):
        payload = await request.json()
        text = payload.get("text")
        if not text:
            next(create_error(422, "text is required"))
            return
        note_id = len(notes) + 1
        notes[note_id] = text
        response.set_status(201).set_header("Location", f"/notes/{note_id}")
        response.json({"id": note_id, "text": text})


class Stats(View):
    errors = staticmethod(json_error)

    def get(self, request, response, next):
        response.json({"count": len(notes)})


def render_errors(error, request, response, next):
    status = getattr(error, "status", 500)
    detail = getattr(error, "detail", "Internal Server Error")
    response.set_status(status).json({"error": detail})


app.use(NoteList.handler(), path="/notes")
app.use(Stats.handler(), path="/stats")
app.use_error(render_errors)


if __name__ == "__main__":
    app.run()
