# backend/mock.py
MOCK_SESSION_ID = "mock-session-1234"

MOCK_MARKDOWN = """# My Heading

## Subheading

This is a text demonstration in which we will be **bolding** some text, making text *italic*, and also, we are going to show a `code snippet`.

### Python Code Snippet

The following is a little piece of Python code:

```python
def hello_world(name):
    \"\"\"A simple function that greets you\"\"\"
    print(f"Hello, {name}!")

hello_world("Mark")
```

### Bullet Points

Here are some bullet points:
- Point 1
- Point 2
- Point 3

#### Numbered List

Alternatively, here's a numbered list:
1. Number 1
2. Number 2
3. Number 3

For strikethrough, you can use `~~strikethrough~~` to achieve the following output: ~~strikethrough~~

##### Hyperlink

Lastly, [Click here to visit Google](https://www.google.com)

-----
### Another Heading

More text goes here.

#### Bold & Italic

You can even use ***bold and italic*** together.

That is all for this markdown demonstration. Goodbye!"""
