# Demo document served by /fallback and referenced by failed generations
FALLBACK_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Tennis Game</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            margin: 0;
            padding: 0;
            display: flex;
            justify-content: center;
            align-items: center;
            height: 100vh;
            background-color: #8BCA2B;
        }

        canvas {
            border: 2px solid #fff;
            background-color: #2e8b57;
            max-width: 100%;
        }

        .score {
            position: absolute;
            top: 10px;
            font-size: 24px;
            color: white;
        }
    </style>
</head>
<body>

<canvas id="gameCanvas" width="600" height="400" aria-label="Tennis court"></canvas>
<div class="score" aria-live="polite">
    Player 1: <span id="score1">0</span> | Player 2: <span id="score2">0</span>
</div>

<script>
    const canvas = document.getElementById('gameCanvas');
    const ctx = canvas.getContext('2d');
    const paddleWidth = 10, paddleHeight = 60, ballRadius = 10;
    const paddleSpeed = 20;

    let leftY = (canvas.height - paddleHeight) / 2;
    let rightY = (canvas.height - paddleHeight) / 2;
    let ballX = canvas.width / 2, ballY = canvas.height / 2;
    let ballSpeedX = 5, ballSpeedY = 5;
    let leftScore = 0, rightScore = 0;
    const keys = { w: false, s: false, ArrowUp: false, ArrowDown: false };

    function drawPaddles() {
        ctx.fillStyle = '#fff';
        ctx.fillRect(0, leftY, paddleWidth, paddleHeight);
        ctx.fillRect(canvas.width - paddleWidth, rightY, paddleWidth, paddleHeight);
    }

    function drawBall() {
        ctx.fillStyle = '#fff';
        ctx.beginPath();
        ctx.arc(ballX, ballY, ballRadius, 0, Math.PI * 2);
        ctx.fill();
    }

    function updateScore() {
        document.getElementById('score1').textContent = leftScore;
        document.getElementById('score2').textContent = rightScore;
    }

    function resetBall() {
        ballX = canvas.width / 2;
        ballY = canvas.height / 2;
        ballSpeedX = -ballSpeedX;
    }

    function moveBall() {
        ballX += ballSpeedX;
        ballY += ballSpeedY;

        if (ballY + ballRadius > canvas.height || ballY - ballRadius < 0) {
            ballSpeedY = -ballSpeedY;
        }

        if (ballX - ballRadius < paddleWidth && ballY > leftY && ballY < leftY + paddleHeight) {
            ballSpeedX = -ballSpeedX;
            leftScore++;
            updateScore();
        } else if (ballX + ballRadius > canvas.width - paddleWidth && ballY > rightY && ballY < rightY + paddleHeight) {
            ballSpeedX = -ballSpeedX;
            rightScore++;
            updateScore();
        }

        if (ballX < 0 || ballX > canvas.width) {
            resetBall();
        }
    }

    function movePaddles() {
        if (keys.w && leftY > 0) leftY -= paddleSpeed;
        if (keys.s && leftY < canvas.height - paddleHeight) leftY += paddleSpeed;
        if (keys.ArrowUp && rightY > 0) rightY -= paddleSpeed;
        if (keys.ArrowDown && rightY < canvas.height - paddleHeight) rightY += paddleSpeed;
    }

    function gameLoop() {
        ctx.clearRect(0, 0, canvas.width, canvas.height);
        drawPaddles();
        drawBall();
        moveBall();
        movePaddles();
        requestAnimationFrame(gameLoop);
    }

    window.addEventListener('keydown', (event) => {
        if (event.key in keys) keys[event.key] = true;
    });

    window.addEventListener('keyup', (event) => {
        if (event.key in keys) keys[event.key] = false;
    });

    gameLoop();
</script>

</body>
</html>
"""
