from typing import List, Optional

from .models import Difficulty, Question


def _q(
    qid: str,
    topic: str,
    question: str,
    options: List[str],
    correct: int,
    code: Optional[str] = None,
) -> Question:
    return Question(
        id=qid,
        question=question,
        code_snippet=code,
        options=options,
        correct_answer=correct,
        difficulty=Difficulty(qid.split("-")[0]),
        topic=topic,
    )


# Built-in bank, 15 questions per difficulty.
DEFAULT_QUESTIONS: List[Question] = [
    # --- easy ---
    _q(
        "easy-1",
        "Web Fundamentals",
        "What does HTML stand for?",
        [
            "Hyper Text Markup Language",
            "High Tech Modern Language",
            "Home Tool Markup Language",
            "Hyperlinks and Text Markup Language",
        ],
        0,
    ),
    _q(
        "easy-2",
        "JavaScript Basics",
        "Which symbol is used for single-line comments in JavaScript?",
        ["//", "/* */", "#", "<!-- -->"],
        0,
        code="// This is a comment\n/* This is also a comment */\n# This too?",
    ),
    _q(
        "easy-3",
        "JavaScript Basics",
        "What is the correct way to declare a variable in modern JavaScript?",
        ["var x = 5;", "let x = 5;", "const x = 5;", "Both B and C"],
        3,
    ),
    _q(
        "easy-4",
        "CSS Basics",
        "Which CSS property is used to change text color?",
        ["font-color", "text-color", "color", "text-style"],
        2,
    ),
    _q(
        "easy-5",
        "HTML Basics",
        "What is the correct HTML tag for the largest heading?",
        ["<heading>", "<h6>", "<head>", "<h1>"],
        3,
    ),
    _q(
        "easy-6",
        "CSS Basics",
        "What does CSS stand for?",
        [
            "Cascading Style Sheets",
            "Computer Style Sheets",
            "Creative Style System",
            "Colorful Style Sheets",
        ],
        0,
    ),
    _q(
        "easy-7",
        "JavaScript Arrays",
        "Which JavaScript method adds an element to the end of an array?",
        ["push()", "pop()", "shift()", "unshift()"],
        0,
    ),
    _q(
        "easy-8",
        "JavaScript Functions",
        "What is the correct way to create a function in JavaScript?",
        [
            "function myFunc() {}",
            "function:myFunc() {}",
            "create myFunc() {}",
            "func myFunc() {}",
        ],
        0,
    ),
    _q(
        "easy-9",
        "HTML Basics",
        "Which HTML tag is used to create a hyperlink?",
        ["<link>", "<a>", "<href>", "<url>"],
        1,
    ),
    _q(
        "easy-10",
        "JavaScript Types",
        "What is the result of 5 + '5' in JavaScript?",
        ["10", "55", "'55'", "Error"],
        2,
    ),
    _q(
        "easy-11",
        "CSS Layout",
        "Which CSS property controls the spacing between elements?",
        ["padding", "margin", "spacing", "gap"],
        1,
    ),
    _q(
        "easy-12",
        "JavaScript Arrays",
        "What is the correct way to write a JavaScript array?",
        [
            "var colors = 'red', 'green', 'blue'",
            "var colors = ['red', 'green', 'blue']",
            "var colors = (1:'red', 2:'green', 3:'blue')",
            "var colors = {'red', 'green', 'blue'}",
        ],
        1,
    ),
    _q(
        "easy-13",
        "CSS Typography",
        "Which property is used in CSS to change the font size?",
        ["text-size", "font-style", "font-size", "text-style"],
        2,
    ),
    _q(
        "easy-14",
        "Web Fundamentals",
        "What does DOM stand for?",
        [
            "Document Object Model",
            "Display Object Management",
            "Digital Ordinance Model",
            "Document Orientation Mode",
        ],
        0,
    ),
    _q(
        "easy-15",
        "JavaScript Operators",
        "Which JavaScript operator is used to compare both value and type?",
        ["==", "===", "=", "!="],
        1,
    ),
    # --- medium ---
    _q(
        "medium-1",
        "JavaScript Types",
        "What will be the output of this code?",
        ["null, undefined", "object, undefined", "null, object", "object, object"],
        1,
        code="console.log(typeof null);\nconsole.log(typeof undefined);",
    ),
    _q(
        "medium-2",
        "React Fundamentals",
        "What is the purpose of the 'key' prop in React lists?",
        [
            "To style list items",
            "To help React identify which items have changed",
            "To sort the list",
            "To make items clickable",
        ],
        1,
    ),
    _q(
        "medium-3",
        "CSS Selectors",
        "What does the following CSS selector target?",
        [
            "All divs inside container",
            "First div that is a direct child of container",
            "First element with class container",
            "All direct children of container",
        ],
        1,
        code=".container > div:first-child",
    ),
    _q(
        "medium-4",
        "JavaScript Advanced",
        "What is closure in JavaScript?",
        [
            "A function that closes other functions",
            "A function that has access to variables in its outer scope",
            "A function that always returns undefined",
            "A syntax error in JavaScript",
        ],
        1,
    ),
    _q(
        "medium-5",
        "React Hooks",
        "Which hook is used for side effects in React?",
        ["useState", "useEffect", "useContext", "useReducer"],
        1,
    ),
    _q(
        "medium-6",
        "JavaScript ES6",
        "What is the difference between 'let' and 'const'?",
        [
            "let can be reassigned, const cannot",
            "const is faster than let",
            "let is block-scoped, const is function-scoped",
            "No difference",
        ],
        0,
    ),
    _q(
        "medium-7",
        "JavaScript ES6",
        "What does the spread operator (...) do?",
        [
            "Concatenates arrays",
            "Expands an iterable into individual elements",
            "Creates a reference copy",
            "Reverses the array",
        ],
        1,
        code="const arr1 = [1, 2];\nconst arr2 = [...arr1, 3, 4];",
    ),
    _q(
        "medium-8",
        "React Concepts",
        "What is the virtual DOM in React?",
        [
            "A copy of the real DOM kept in memory",
            "A faster version of the DOM API",
            "A virtual machine for React",
            "A debugging tool",
        ],
        0,
    ),
    _q(
        "medium-9",
        "JavaScript Async",
        "What is the purpose of async/await?",
        [
            "To make code run faster",
            "To handle asynchronous operations more readably",
            "To create parallel threads",
            "To prevent errors",
        ],
        1,
    ),
    _q(
        "medium-10",
        "JavaScript Events",
        "What is event bubbling in JavaScript?",
        [
            "When events float to the top",
            "When events propagate from child to parent elements",
            "When events are cancelled",
            "When multiple events fire at once",
        ],
        1,
    ),
    _q(
        "medium-11",
        "JavaScript Context",
        "What does 'this' refer to in JavaScript?",
        [
            "Always the global object",
            "The object that is executing the current function",
            "The parent function",
            "Always undefined",
        ],
        1,
    ),
    _q(
        "medium-12",
        "React Hooks",
        "What is the purpose of useContext in React?",
        [
            "To create context",
            "To access context values",
            "To update context",
            "To delete context",
        ],
        1,
    ),
    _q(
        "medium-13",
        "JavaScript Arrays",
        "What is the difference between map() and forEach()?",
        [
            "No difference",
            "map() returns a new array, forEach() doesn't",
            "forEach() is faster",
            "map() can only be used with numbers",
        ],
        1,
    ),
    _q(
        "medium-14",
        "CSS Layout",
        "What is CSS Flexbox used for?",
        [
            "Creating flexible layouts",
            "Making text flexible",
            "Creating animations",
            "Styling forms",
        ],
        0,
    ),
    _q(
        "medium-15",
        "React Hooks",
        "What is the purpose of the useState hook?",
        [
            "To fetch data from APIs",
            "To manage component state",
            "To handle side effects",
            "To create context",
        ],
        1,
    ),
    # --- hard ---
    _q(
        "hard-1",
        "ES6+ Features",
        "What is the output of this code?",
        ["1 2", "1 3", "undefined 3", "Error"],
        1,
        code="const arr = [1, 2, 3];\nconst [a, , b] = arr;\nconsole.log(a, b);",
    ),
    _q(
        "hard-2",
        "Algorithms",
        "What is the time complexity of binary search?",
        ["O(n)", "O(log n)", "O(n²)", "O(1)"],
        1,
    ),
    _q(
        "hard-3",
        "React Internals",
        "Which statement about React's reconciliation algorithm is TRUE?",
        [
            "It always re-renders the entire component tree",
            "It uses a diffing algorithm to minimize DOM updates",
            "It only works with class components",
            "It requires manual optimization",
        ],
        1,
    ),
    _q(
        "hard-4",
        "Async JavaScript",
        "What will this Promise chain output?",
        ["2", "3", "4", "Error"],
        2,
        code=(
            "Promise.resolve(1)\n"
            "  .then(x => x + 1)\n"
            "  .then(x => { throw new Error('!') })\n"
            "  .catch(() => 3)\n"
            "  .then(x => x + 1)\n"
            "  .then(x => console.log(x));"
        ),
    ),
    _q(
        "hard-5",
        "JavaScript Advanced",
        "What is the purpose of WeakMap in JavaScript?",
        [
            "To store weak references that don't prevent garbage collection",
            "To create maps with weak security",
            "To store smaller data sets",
            "To improve map performance",
        ],
        0,
    ),
    _q(
        "hard-6",
        "JavaScript Numbers",
        "What is the output of this code?",
        ["true", "false", "undefined", "Error"],
        1,
        code="console.log(0.1 + 0.2 === 0.3);",
    ),
    _q(
        "hard-7",
        "React Performance",
        "What is memoization in React?",
        [
            "Storing memory addresses",
            "Caching function results to avoid recalculation",
            "Creating memory leaks",
            "A debugging technique",
        ],
        1,
    ),
    _q(
        "hard-8",
        "JavaScript Internals",
        "What is the event loop in JavaScript?",
        [
            "A loop that creates events",
            "A mechanism that handles asynchronous callbacks",
            "A debugging tool",
            "A performance optimizer",
        ],
        1,
    ),
    _q(
        "hard-9",
        "JavaScript Objects",
        "What does Object.create() do?",
        [
            "Creates a new object with specified prototype",
            "Copies an existing object",
            "Creates an empty object",
            "Converts arrays to objects",
        ],
        0,
    ),
    _q(
        "hard-10",
        "JavaScript Functions",
        "What is the difference between call() and apply()?",
        [
            "No difference",
            "call() takes arguments separately, apply() takes array",
            "apply() is faster",
            "call() is deprecated",
        ],
        1,
    ),
    _q(
        "hard-11",
        "JavaScript Patterns",
        "What is debouncing in JavaScript?",
        [
            "Removing bugs from code",
            "Delaying function execution until after a pause in events",
            "A testing technique",
            "A type of error handling",
        ],
        1,
    ),
    _q(
        "hard-12",
        "JavaScript ES6",
        "What is the purpose of Symbol in JavaScript?",
        [
            "To create unique identifiers",
            "To create mathematical symbols",
            "To represent special characters",
            "To improve performance",
        ],
        0,
    ),
    _q(
        "hard-13",
        "JavaScript Objects",
        "What is the difference between shallow and deep copy?",
        [
            "No difference",
            "Shallow copies only the first level, deep copies all nested levels",
            "Deep copy is faster",
            "Shallow copy is more memory efficient",
        ],
        1,
    ),
    _q(
        "hard-14",
        "React Internals",
        "What is React Fiber?",
        [
            "A new type of component",
            "A reimplementation of React's reconciliation algorithm",
            "A state management library",
            "A testing framework",
        ],
        1,
    ),
    _q(
        "hard-15",
        "JavaScript OOP",
        "What is the prototype chain in JavaScript?",
        [
            "A linked list of objects",
            "A mechanism for inheritance where objects inherit properties "
            "from other objects",
            "A debugging tool",
            "A performance optimization",
        ],
        1,
    ),
]
